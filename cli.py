import argparse
import binascii
import json
import logging
import sys
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives import serialization

from ecsign.appstore import AppStoreConnectTokenFactory
from ecsign.config import load_config
from ecsign.der import ES256_PART_LENGTH, der_to_raw, raw_to_der
from ecsign.errors import ECSignError
from ecsign.registry import InMemoryKeyRegistry
from ecsign.signer import load_public_key
from ecsign.token import decode_unverified, sign
from ecsign.verification import Verifier

def generate_keypair():
    private_key = ec.generate_private_key(ec.SECP256R1())
    public_key = private_key.public_key()

    priv_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )
    pub_pem = public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )

    print(priv_pem.decode("ascii"), end="")
    print(pub_pem.decode("ascii"), end="")

def sign_token(header_path: str, payload_path: str, key_path: str):
    with open(header_path, 'r') as f:
        header = json.load(f)
    with open(payload_path, 'r') as f:
        payload = json.load(f)
    with open(key_path, 'rb') as f:
        key = f.read()

    print(sign(payload, header, key))

def appstore_token(config_path: str):
    config = load_config(config_path)
    print(AppStoreConnectTokenFactory(config).create_token())

def verify_token(token: str, public_key_path: str):
    with open(public_key_path, 'rb') as f:
        public_key = load_public_key(f.read())

    registry = InMemoryKeyRegistry()
    # Pre-populate registry with the provided key for the kid in the token
    kid = decode_unverified(token).header.get("kid")
    if kid:
        registry.add_key(kid, public_key)

    if Verifier(registry).verify(token):
        print("VERIFIED: OK")
        sys.exit(0)
    else:
        print("VERIFICATION FAILED")
        sys.exit(1)

def convert_signature(command: str, signature_hex: str, part_length: int):
    data = binascii.unhexlify(signature_hex)
    if command == "der2raw":
        print(der_to_raw(data, part_length).hex())
    else:
        print(raw_to_der(data, part_length).hex())

def main():
    parser = argparse.ArgumentParser(description="ES256 token signing CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("keygen")

    sign_parser = subparsers.add_parser("sign")
    sign_parser.add_argument("header", help="Header JSON file")
    sign_parser.add_argument("payload", help="Payload JSON file")
    sign_parser.add_argument("--key", required=True, help="Private key PEM file")

    appstore_parser = subparsers.add_parser("appstore")
    appstore_parser.add_argument("--config", default=None, help="YAML config file")

    verify_parser = subparsers.add_parser("verify")
    verify_parser.add_argument("token", help="Compact token")
    verify_parser.add_argument("--pub", required=True, help="Public key PEM file")

    for name in ("der2raw", "raw2der"):
        convert_parser = subparsers.add_parser(name)
        convert_parser.add_argument("signature", help="Signature (hex)")
        convert_parser.add_argument("--part-length", type=int, default=ES256_PART_LENGTH)

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "keygen":
            generate_keypair()
        elif args.command == "sign":
            sign_token(args.header, args.payload, args.key)
        elif args.command == "appstore":
            appstore_token(args.config)
        elif args.command == "verify":
            verify_token(args.token, args.pub)
        elif args.command in ("der2raw", "raw2der"):
            convert_signature(args.command, args.signature, args.part_length)
        else:
            parser.print_help()
    except (ECSignError, ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(2)

if __name__ == "__main__":
    main()
