# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Loads CV and job description text from local files (TXT, DOCX, PDF).
"""

import logging
from pathlib import Path

from docx import Document
from pypdf import PdfReader

from cv_improv.errors import ValidationError

logger = logging.getLogger(__name__)

def read_docx(file_path: Path) -> str:
    doc = Document(str(file_path))
    return '\n'.join(para.text for para in doc.paragraphs)

def read_pdf(file_path: Path) -> str:
    reader = PdfReader(str(file_path))
    return '\n'.join(page.extract_text() or "" for page in reader.pages)

def load_text(path: str) -> str:
    """
    Reads a document and returns its text.
    Raises ValidationError if the file is missing, unreadable or empty.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ValidationError(f"File not found: {path}")

    suffix = file_path.suffix.lower()
    try:
        if suffix == ".docx":
            text = read_docx(file_path)
        elif suffix == ".pdf":
            text = read_pdf(file_path)
        else:
            text = file_path.read_text(encoding="utf-8")
    except Exception as e:
        logger.error(f"Error reading {file_path}: {e}")
        raise ValidationError(f"Could not read {file_path.name}: {e}") from e

    if not text.strip():
        raise ValidationError(f"No text could be extracted from {file_path.name}")

    logger.debug(f"Loaded {len(text)} characters from {file_path}")
    return text
