"""
SRT Player CLI - play a subtitle file in the terminal.

Entry point:
    srt-player    - Play an SRT file in real time
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

# Fix Windows console encoding for unicode characters
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

logger = logging.getLogger('cli')


def validate_port(value: str) -> int:
    """Validate port number is in valid range."""
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid port number: {value}")

    if not 1 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"Port must be between 1 and 65535, got: {port}")
    return port


def validate_positive_float(value: str) -> float:
    """Validate positive number."""
    try:
        num = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number: {value}")

    if num <= 0:
        raise argparse.ArgumentTypeError(f"Value must be positive, got: {num}")
    return num


def validate_non_negative_float(value: str) -> float:
    """Validate number >= 0."""
    try:
        num = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number: {value}")

    if num < 0:
        raise argparse.ArgumentTypeError(f"Value must not be negative, got: {num}")
    return num


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="srt-player",
        description="SRT Player - Play subtitle files against a real-time clock",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  srt-player movie.srt                      # Play from the beginning
  srt-player movie.srt --start 95.5         # Start at 1:35.5
  srt-player movie.srt --list               # Print parsed cues and exit
  srt-player movie.srt --broadcast-port 8766  # Also serve cue changes over WebSocket
        """,
    )

    parser.add_argument("file", type=Path, help="SRT subtitle file")

    playback_group = parser.add_argument_group("Playback")
    playback_group.add_argument(
        "--start",
        "-s",
        type=validate_non_negative_float,
        default=None,
        help="Start position in seconds (default: 0)",
    )
    playback_group.add_argument(
        "--fps",
        type=validate_positive_float,
        default=None,
        help="Timeline frame rate (default: 60 or $SRT_PLAYER_FPS)",
    )
    playback_group.add_argument(
        "--encoding",
        type=str,
        default=None,
        help="Subtitle file encoding (default: utf-8-sig)",
    )
    playback_group.add_argument(
        "--list", action="store_true", help="Print parsed cues and exit"
    )

    output_group = parser.add_argument_group("Output")
    output_group.add_argument(
        "--broadcast-port",
        type=validate_port,
        default=None,
        help="Serve cue changes to WebSocket clients on this port",
    )
    output_group.add_argument(
        "--no-display", action="store_true", help="Disable terminal display"
    )
    output_group.add_argument(
        "--no-color", action="store_true", help="Disable ANSI colors"
    )

    misc_group = parser.add_argument_group("Misc")
    misc_group.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (default: ~/.config/srt-player/config.json)",
    )
    misc_group.add_argument(
        "--save-config",
        action="store_true",
        help="Write the effective settings to the config file and exit",
    )
    misc_group.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING or $SRT_PLAYER_LOG_LEVEL)",
    )
    return parser


def main(argv=None):
    """
    Main entry point.

    Parses the subtitle file, then drives the timeline on an asyncio loop,
    redrawing the terminal display and broadcasting cue changes.
    """
    args = build_parser().parse_args(argv)

    from srt_player.config import load_config, save_config
    from srt_player.logging_config import configure_logging

    # Precedence: config file, then environment, then command line
    try:
        config = load_config(args.config).apply_env()
    except (OSError, TypeError, ValueError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    if args.fps is not None:
        config.playback.fps = args.fps
    if args.start is not None:
        config.playback.start_at = args.start
    if args.encoding is not None:
        config.playback.encoding = args.encoding
    if args.broadcast_port is not None:
        config.broadcast.enabled = True
        config.broadcast.port = args.broadcast_port
    if args.no_display:
        config.show_display = False
    if args.no_color:
        config.color = False
    if args.log_level is not None:
        config.log_level = args.log_level

    configure_logging(config.log_level)

    if args.save_config:
        try:
            save_config(config, args.config)
        except OSError as e:
            print(f"Error: cannot write configuration: {e}", file=sys.stderr)
            return 1
        logger.info("Saved configuration")
        return 0

    from srt_player.display import TerminalCueDisplay, format_cue_list
    from srt_player.player import SrtPlayer
    from srt_player.timeline import AsyncioFrameScheduler

    display = TerminalCueDisplay(color=config.color)
    broadcaster = None
    if config.broadcast.enabled:
        from srt_player.broadcast import CueBroadcaster

        broadcaster = CueBroadcaster(host=config.broadcast.host, port=config.broadcast.port)

    def cue_sink(cues):
        display.set_cues(cues)
        if broadcaster:
            broadcaster.set_cues(cues)

    def on_cue_change(text, cue):
        display.on_cue_change(text, cue)
        if broadcaster:
            broadcaster.on_cue_change(text, cue)

    try:
        player = SrtPlayer.from_file(
            args.file,
            encoding=config.playback.encoding,
            cue_sink=cue_sink,
            on_cue_change=on_cue_change,
            scheduler=AsyncioFrameScheduler(fps=config.playback.fps),
        )
    except OSError as e:
        print(f"Error: cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    if args.list:
        print(format_cue_list(player.cues))
        return 0

    if not player.cues:
        print(f"Error: no subtitle cues found in {args.file}", file=sys.stderr)
        return 1

    stop_requested = asyncio.Event()

    # Signal handlers
    def signal_handler(sig, frame):
        stop_requested.set()

    signal.signal(signal.SIGTERM, signal_handler)

    try:
        asyncio.run(_run_player(player, display, broadcaster, config, stop_requested))
    except KeyboardInterrupt:
        pass

    return 0


async def _run_player(player, display, broadcaster, config, stop_requested):
    """Play until the last cue ends or a stop is requested."""
    if broadcaster:
        await broadcaster.start()

    interval = 1.0 / config.playback.fps
    end_time = display.total_duration

    try:
        player.play()
        if config.playback.start_at > 0:
            player.set_time_second(config.playback.start_at)

        while not stop_requested.is_set():
            elapsed = player.engine.elapsed
            if config.show_display:
                display.display(elapsed, player.engine.state.value)
            if elapsed > end_time:
                logger.info(f"Reached end of subtitles at {elapsed:.3f}s")
                break
            await asyncio.sleep(interval)
    finally:
        player.destroy()
        if config.show_display:
            display.clear()
        if broadcaster:
            await broadcaster.stop()


if __name__ == "__main__":
    sys.exit(main())
