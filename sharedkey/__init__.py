from .utils import InvalidCredentialError, SharedKeySigner, SigningRequest, uri_segments

__all__ = ['InvalidCredentialError', 'SharedKeySigner', 'SigningRequest', 'uri_segments']
