"""
Request handlers for the uploads API.
"""

from .upload_service import IncomingFile, UploadResult, UploadHandler, RetrievalHandler

__all__ = [
    'IncomingFile', 'UploadResult',
    'UploadHandler', 'RetrievalHandler'
]
