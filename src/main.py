"""
Slot Timeline - Entry Point
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path for running as script
sys.path.insert(0, str(Path(__file__).parent))

from PyQt6.QtWidgets import QApplication

from ui.main_window import SlotEditorWindow
from ui.theme import ModernDarkTheme


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Edit labelled time slots over a video")
    parser.add_argument("video", nargs="?", help="Video file to open")
    parser.add_argument("--video-id", help="Timeline key (defaults to the video file name)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main():
    """Application entry point"""
    args = parse_args(sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    ModernDarkTheme.apply(app)

    window = SlotEditorWindow(video_id=args.video_id or "")
    if args.video:
        window.open_video(args.video, args.video_id)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
