# main.py
from __future__ import annotations
import argparse
import logging
import sys
from vizr.qt import QtGui, QtWidgets
from app_config import APP_DESCRIPTION, CLI_EXAMPLES, CLI_NAME, SAMPLE_VISUALIZATION, apply_qsettings_org, banner, ensure_app_dirs
from vizr.core.logging import setup_logging


def _size(text: str) -> tuple[int, int]:
    try:
        w, h = text.lower().split("x", 1)
        return max(1, int(w)), max(1, int(h))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=CLI_NAME,
        description=APP_DESCRIPTION,
        epilog=CLI_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--open", metavar="PATH", help="payload file (JSON, markdown or text); '-' reads stdin")
    parser.add_argument("--sample", action="store_true", help="load the built-in sample visualization")
    parser.add_argument("--dark", action="store_true", default=None, help="start in dark mode")
    parser.add_argument("--snapshot", metavar="OUT", help="render one frame to an image file and exit")
    parser.add_argument("--at", type=float, default=0.0, metavar="MS", help="elapsed time for --snapshot")
    parser.add_argument("--size", type=_size, default=(640, 400), metavar="WxH", help="image size for --snapshot")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    return parser


def _snapshot(args, payload) -> int:
    from vizr.render.snapshot import save_snapshot
    _app = QtGui.QGuiApplication.instance() or QtGui.QGuiApplication(sys.argv[:1])
    ok = save_snapshot(args.snapshot, payload, args.at, args.size, bool(args.dark))
    logging.getLogger(__name__).info("Snapshot %s -> %s", "written" if ok else "FAILED", args.snapshot)
    return 0 if ok else 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    ensure_app_dirs()
    apply_qsettings_org()
    logger = setup_logging(level=logging.DEBUG if args.debug else logging.INFO)

    payload = None
    if args.open:
        from vizr.core.sources import read_payload_text
        try:
            payload = read_payload_text(args.open)
        except (OSError, UnicodeDecodeError) as ex:
            logger.error("Could not read %s: %s", args.open, ex)
            return 2
    elif args.sample:
        payload = SAMPLE_VISUALIZATION

    if args.snapshot:
        return _snapshot(args, payload)

    from vizr.ui.main_window import MainWindow
    from vizr.ui.theme import apply_fusion_theme

    app = QtWidgets.QApplication(sys.argv[:1])
    logger.info(banner())

    mw = MainWindow(dark=args.dark)
    apply_fusion_theme(app, mw.player.dark)
    if payload is not None:
        mw.deliver(payload)
    else:
        mw.dev_seed_from_config()
    mw.show()

    return app.exec()

if __name__ == "__main__":
    raise SystemExit(main())
