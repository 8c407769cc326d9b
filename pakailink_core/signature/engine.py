"""
Signature Engine
================
RSA and HMAC signing bound to one set of PakaiLink credentials.
"""

import base64
import binascii
from pathlib import Path
from typing import Optional, Union

import structlog
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..exceptions import KeyLoadError, SigningError
from .models import SignedRequest
from .signature import (
    compare_signatures,
    compute_callback_signature,
    compute_symmetric_signature,
    hash_body,
    minify_json,
)

logger = structlog.get_logger(__name__)


class SignatureEngine:
    """
    Signs outgoing SNAP requests and verifies PakaiLink callbacks.

    - Asymmetric (RSA-SHA256) for the B2B token request
    - Symmetric (HMAC-SHA512) for every call made with the bearer token
    - HMAC-SHA512 over ``rawBody + timestamp`` for callbacks

    The private key is loaded on first use and kept for the life of the
    engine.
    """

    def __init__(
        self,
        client_secret: str,
        private_key_path: Optional[Union[str, Path]] = None,
        public_key_path: Optional[Union[str, Path]] = None,
    ):
        self.client_secret = client_secret
        self.private_key_path = Path(private_key_path) if private_key_path else None
        self.public_key_path = Path(public_key_path) if public_key_path else None
        self._private_key: Optional[rsa.RSAPrivateKey] = None
        self._public_key: Optional[rsa.RSAPublicKey] = None

    @classmethod
    def from_config(cls, config) -> "SignatureEngine":
        return cls(
            client_secret=config.client_secret,
            private_key_path=config.private_key_path,
            public_key_path=config.public_key_path,
        )

    # Key loading

    def _read_key_file(self, path: Optional[Path], kind: str) -> bytes:
        if path is None:
            raise KeyLoadError(f"No {kind} key path configured")
        try:
            return path.read_bytes()
        except OSError as e:
            logger.error("Failed to read key file", kind=kind, path=str(path), error=str(e))
            raise KeyLoadError(f"{kind.capitalize()} key file not found: {path}", details=str(e))

    def _load_private_key(self) -> rsa.RSAPrivateKey:
        if self._private_key is None:
            pem = self._read_key_file(self.private_key_path, "private")
            try:
                key = serialization.load_pem_private_key(pem, password=None)
            except (ValueError, TypeError, UnsupportedAlgorithm) as e:
                logger.error("Failed to load private key", error=str(e))
                raise KeyLoadError(f"Failed to load private key: {e}")
            if not isinstance(key, rsa.RSAPrivateKey):
                raise KeyLoadError("Private key is not an RSA key")
            self._private_key = key
        return self._private_key

    def _load_public_key(self) -> rsa.RSAPublicKey:
        if self._public_key is None:
            pem = self._read_key_file(self.public_key_path, "public")
            try:
                key = serialization.load_pem_public_key(pem)
            except (ValueError, UnsupportedAlgorithm) as e:
                logger.error("Failed to load public key", error=str(e))
                raise KeyLoadError(f"Failed to load public key: {e}")
            if not isinstance(key, rsa.RSAPublicKey):
                raise KeyLoadError("Public key is not an RSA key")
            self._public_key = key
        return self._public_key

    # Asymmetric

    def sign_asymmetric(self, client_id: str, timestamp: str) -> str:
        """
        Sign ``clientId|timestamp`` for the B2B token request.

        Raises:
            KeyLoadError: If the private key is missing or unparseable
            SigningError: If the RSA signing primitive fails
        """
        private_key = self._load_private_key()
        string_to_sign = f"{client_id}|{timestamp}"
        try:
            signature = private_key.sign(
                string_to_sign.encode("utf-8"),
                padding.PKCS1v15(),
                hashes.SHA256(),
            )
        except (ValueError, TypeError) as e:
            logger.error("Failed to generate asymmetric signature", error=str(e))
            raise SigningError(f"Failed to generate signature: {e}")

        logger.debug("Asymmetric signature generated", client_id=client_id, timestamp=timestamp)
        return base64.b64encode(signature).decode("ascii")

    def verify_asymmetric(self, client_id: str, timestamp: str, signature: str) -> bool:
        """Check an asymmetric signature against the configured public key."""
        public_key = self._load_public_key()
        try:
            public_key.verify(
                base64.b64decode(signature, validate=True),
                f"{client_id}|{timestamp}".encode("utf-8"),
                padding.PKCS1v15(),
                hashes.SHA256(),
            )
        except (InvalidSignature, binascii.Error, ValueError):
            return False
        return True

    # Symmetric

    def sign_symmetric(
        self,
        method: str,
        path: str,
        access_token: str,
        body_json: Union[str, bytes, None],
        timestamp: str,
    ) -> str:
        """
        Sign an authenticated API call.

        Raises:
            MalformedBodyError: If body_json is non-empty and not valid JSON
        """
        return self.build_signed_request(method, path, access_token, body_json, timestamp).signature

    def build_signed_request(
        self,
        method: str,
        path: str,
        access_token: str,
        body_json: Union[str, bytes, None],
        timestamp: str,
    ) -> SignedRequest:
        minified = minify_json(body_json)
        body_hash = hash_body(minified)
        signature = compute_symmetric_signature(
            self.client_secret, method, path, access_token, body_hash, timestamp
        )
        logger.debug(
            "Symmetric signature generated",
            method=method.upper(),
            path=path,
            body_hash=body_hash,
            timestamp=timestamp,
        )
        return SignedRequest(
            method=method.upper(),
            path=path,
            access_token=access_token,
            body=minified,
            body_hash=body_hash,
            timestamp=timestamp,
            signature=signature,
        )

    # Callbacks

    def generate_callback_signature(self, raw_body: Union[str, bytes], timestamp: str) -> str:
        return compute_callback_signature(self.client_secret, raw_body, timestamp)

    def verify_callback_signature(
        self,
        received_signature: str,
        raw_body: Union[str, bytes],
        timestamp: str,
    ) -> bool:
        """
        Verify a callback signature in constant time.

        Fails closed: any internal error yields False.
        """
        try:
            expected = self.generate_callback_signature(raw_body, timestamp)
            is_valid = compare_signatures(expected, received_signature)
        except Exception as e:
            logger.error("Failed to validate callback signature", error=str(e))
            return False

        logger.debug("Callback signature validation result", is_valid=is_valid, timestamp=timestamp)
        return is_valid
