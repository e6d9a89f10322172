"""pdfbridge - HTML/URL to PDF conversion service."""

__version__ = "0.1.0"
