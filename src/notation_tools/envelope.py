"""Signature envelope format names."""

JWS = "jws"
COSE = "cose"

DEFAULT_SIGNATURE_FORMAT = JWS
