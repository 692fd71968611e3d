"""Helpers shared by the test modules."""

import base64
from pathlib import Path

PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 16
PDF_BYTES = b'%PDF-1.4\n%test document\n'


def image_data_url(content=PNG_BYTES, subtype='png'):
    return f"data:image/{subtype};base64,{base64.b64encode(content).decode()}"


def pdf_data_url(content=PDF_BYTES):
    return f"data:application/pdf;base64,{base64.b64encode(content).decode()}"


def stored_files(root):
    root = Path(root)
    if not root.exists():
        return []
    return sorted(p for p in root.rglob('*') if p.is_file())


def path_for_url(root, url):
    return Path(root) / url.split('/storage/', 1)[1]
