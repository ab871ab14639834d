"""HTTP question-answering service backed by GigaChat or an offline mock."""

__version__ = "0.1.0"
