#!/usr/bin/env python3
"""
Decrypt a CSV export that was written with BUNDY_EXPORT_KEY set.

Usage:
    python scripts/decrypt_export.py --input exports/bundy-export-2024-01-01-to-2024-01-31.csv --output timesheet.csv
    BUNDY_EXPORT_KEY=secret python scripts/decrypt_export.py -i exports/bundy-export-2024-01-01-to-2024-01-31.csv -o plain.csv
"""
import argparse
import logging
import os
import sys

# Add parent directory to path to import bundy
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bundy.utils.errors import BundyError
from bundy.utils.export_utils import decrypt_file


def main():
    parser = argparse.ArgumentParser(
        description='Decrypt an encrypted timesheet export',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --input /media/usb/bundy-export-2024-01-01-to-2024-01-31.csv --output plain.csv
        """
    )
    parser.add_argument('--input', '-i', required=True, help='Encrypted export file')
    parser.add_argument('--output', '-o', required=True, help='Where to write the plain CSV')
    parser.add_argument('--passphrase', '-p', default=os.getenv('BUNDY_EXPORT_KEY'),
                        help='Export passphrase (default: BUNDY_EXPORT_KEY)')
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    if not args.passphrase:
        print("❌ No passphrase given and BUNDY_EXPORT_KEY is not set")
        sys.exit(1)

    try:
        path = decrypt_file(args.input, args.output, args.passphrase)
    except BundyError as e:
        print(f"❌ Failed to decrypt export: {e}")
        sys.exit(1)
    print(f"✅ Decrypted export written to {path}")


if __name__ == '__main__':
    main()
