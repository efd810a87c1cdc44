"""scantrim: strip blank scanned pages from incoming PDFs and archive them."""
