from .file_ingestor import FileIngestor

__all__ = ['FileIngestor']
