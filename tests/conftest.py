from datetime import datetime, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa, x25519
from cryptography.x509.oid import NameOID

NOT_BEFORE = datetime(2025, 7, 15, 20, 28, 54, tzinfo=timezone.utc)
NOT_AFTER = datetime(2026, 7, 15, 20, 28, 54, tzinfo=timezone.utc)

SAN_NAMES = ["example.com", "www.example.com", "api.example.com", "*.example.com"]

# openssl ecparam -name prime256v1
EC_PARAMETERS_PEM = b"""-----BEGIN EC PARAMETERS-----
BggqhkjOPQMBBw==
-----END EC PARAMETERS-----
"""


def private_pem(key, fmt) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=fmt,
        encryption_algorithm=serialization.NoEncryption()
    )


def pkcs8_pem(key) -> bytes:
    return private_pem(key, serialization.PrivateFormat.PKCS8)


def traditional_pem(key) -> bytes:
    """PKCS#1 for RSA keys, SEC 1 for EC keys."""
    return private_pem(key, serialization.PrivateFormat.TraditionalOpenSSL)


def build_certificate(key, names=None, common_name="example.com"):
    subject = issuer = x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Example Org"),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])

    builder = x509.CertificateBuilder().subject_name(
        subject
    ).issuer_name(
        issuer
    ).public_key(
        key.public_key()
    ).serial_number(
        x509.random_serial_number()
    ).not_valid_before(
        NOT_BEFORE
    ).not_valid_after(
        NOT_AFTER
    )

    if names is not None:
        builder = builder.add_extension(
            x509.SubjectAlternativeName([
                x509.DNSName(name) if isinstance(name, str) else name for name in names
            ]),
            critical=False,
        )

    return builder.sign(key, hashes.SHA256())


def cert_pem(cert) -> bytes:
    return cert.public_bytes(serialization.Encoding.PEM)


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ec384_key():
    return ec.generate_private_key(ec.SECP384R1())


@pytest.fixture(scope="session")
def ed25519_key():
    return ed25519.Ed25519PrivateKey.generate()


@pytest.fixture(scope="session")
def x25519_key():
    return x25519.X25519PrivateKey.generate()


@pytest.fixture(scope="session")
def ed448_key():
    return ed448.Ed448PrivateKey.generate()


@pytest.fixture(scope="session")
def dsa_key():
    return dsa.generate_private_key(key_size=2048)


@pytest.fixture(scope="session")
def san_certificate(ec_key):
    return build_certificate(ec_key, names=SAN_NAMES)


@pytest.fixture(scope="session")
def plain_certificate(ec_key):
    return build_certificate(ec_key, common_name="plain.example.com")


@pytest.fixture
def write_file(tmp_path):
    """Write bytes to a file under tmp_path and return its path as a string."""
    def _write(name: str, content: bytes) -> str:
        path = tmp_path / name
        path.write_bytes(content)
        return str(path)
    return _write
