"""Verify that the libraries the pipeline needs are installed."""

from __future__ import annotations

import sys
from typing import List, Tuple


def check_dependencies() -> List[Tuple[str, bool, str]]:
    """Check required dependencies. Returns list of (name, ok, message)."""
    results: List[Tuple[str, bool, str]] = []

    try:
        import fitz  # pymupdf
        version = getattr(fitz, "VersionBind", "") or getattr(fitz, "__version__", "")
        results.append(("pymupdf (fitz)", True, f"OK {version}".strip()))
    except ImportError as e:
        results.append(("pymupdf (fitz)", False, f"Missing: {e}"))

    try:
        import PIL
        from PIL import features
        jpeg_ok = features.check("jpg")
        if jpeg_ok:
            results.append(("Pillow (PIL)", True, f"OK {PIL.__version__}"))
        else:
            results.append(("Pillow (PIL)", False, "Installed without JPEG support"))
    except ImportError as e:
        results.append(("Pillow (PIL)", False, f"Missing: {e}"))

    try:
        import yaml
        results.append(("PyYAML", True, f"OK {yaml.__version__}"))
    except ImportError as e:
        results.append(("PyYAML", False, f"Missing: {e}"))

    return results


def run_check(verbose: bool = True) -> bool:
    """Run dependency check, print report, return True if all OK."""
    results = check_dependencies()
    ok_count = sum(1 for _, ok, _ in results if ok)
    all_ok = ok_count == len(results)

    if verbose:
        print("Dependency check\n")
        for name, ok, msg in results:
            status = "OK" if ok else "MISSING/ERROR"
            if ok:
                print(f"  {name}: {msg}")
            else:
                print(f"  {name}: {status}  {msg}")
        print()
        if all_ok:
            print("All checked dependencies are available.")
        else:
            print(f"Problems with {len(results) - ok_count} of {len(results)}. Install with: pip install -e .")

    return all_ok


if __name__ == "__main__":
    success = run_check(verbose=True)
    sys.exit(0 if success else 1)
