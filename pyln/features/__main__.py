"""Inspect and compare feature bitmaps from the command line.

    python -m pyln.features decode 0x028200
    python -m pyln.features encode 9 15
    python -m pyln.features check 4100 0100
"""
from . import codec
from .compat import is_supported_by, missing_features
from .feature import FeatureScope
from typing import List, Optional
import argparse
import logging
import sys


logger = logging.getLogger("pyln.features")


def cmd_decode(args) -> int:
    features = codec.from_hex(args.bitmap)
    if args.scope is not None:
        features = features.filter_by_scope(FeatureScope(args.scope))

    for f, sup in sorted(features.activated.items(), key=lambda i: i[0].mandatory):
        print("{} (bit {}, {})".format(f.name, f.support_bit(sup), sup))
    for u in sorted(features.unknown):
        print("unknown (bit {}, {})".format(
            u.bit_index, "optional" if u.is_odd() else "mandatory"))
    return 0


def cmd_encode(args) -> int:
    print(codec.encode_bits(args.bits).hex())
    return 0


def cmd_check(args) -> int:
    local = codec.from_hex(args.local)
    remote = codec.from_hex(args.remote)

    # Report each direction, so the user sees who is missing what.
    bad = False
    for name, receiver, sender in (("local", local, remote), ("remote", remote, local)):
        if not is_supported_by(receiver, sender):
            bad = True
            print("{} is missing bits {}".format(
                name, " ".join(str(b) for b in missing_features(receiver, sender))))

    print("incompatible" if bad else "compatible")
    return 1 if bad else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pyln-features",
        description="Decode, encode and compare BOLT #9 feature bitmaps")
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: %(default)s)")
    sub = parser.add_subparsers(dest="command")
    sub.required = True

    p = sub.add_parser("decode", help="List the features set in a hex bitmap")
    p.add_argument("bitmap", help="Hex encoded feature bitmap")
    p.add_argument("--scope", choices=[s.value for s in FeatureScope],
                   help="Only show features allowed in this context")
    p.set_defaults(func=cmd_decode)

    p = sub.add_parser("encode", help="Hex encode a set of bit indices")
    p.add_argument("bits", type=int, nargs="+", help="Bit indices to set")
    p.set_defaults(func=cmd_encode)

    p = sub.add_parser("check", help="Check whether two peers are compatible")
    p.add_argument("local", help="Our hex encoded feature bitmap")
    p.add_argument("remote", help="Their hex encoded feature bitmap")
    p.set_defaults(func=cmd_check)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.StreamHandler()
        ]
    )

    try:
        return args.func(args)
    except ValueError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print("error: {}".format(e), file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
