import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .backends.base import LocatorBackend
from .errors import ConfigurationError, LocatorError
from .logging_setup import setup_logging
from .presentation import format_result
from .session import LocatorSession
from .settings import settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ANALYSIS_FAILED = 1
EXIT_CONFIG_ERROR = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="geo-locator",
        description="Identify where a photo or video was taken and narrate it in English or Russian.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the relay service.")
    serve.add_argument("--host", default=None, help="Bind address (default: GEO_RELAY_HOST).")
    serve.add_argument("--port", type=int, default=None, help="Port (default: GEO_RELAY_PORT).")

    locate = sub.add_parser("locate", help="Analyze a single image or video.")
    locate.add_argument("file", help="Path to the image or video.")
    locate.add_argument("--mime-type", default=None, help="Override the guessed content type.")
    locate.add_argument(
        "--lang",
        choices=["en", "ru"],
        default=settings.session.default_language,
        help="Language for the displayed text and the spoken summary.",
    )
    locate.add_argument("--lat", type=float, default=None, help="Latitude hint.")
    locate.add_argument("--lon", type=float, default=None, help="Longitude hint.")
    locate.add_argument(
        "--relay-url",
        default=settings.relay.base_url,
        help="Relay base URL. When omitted the model is called directly.",
    )
    locate.add_argument("--play", action="store_true", help="Play the spoken summary.")
    locate.add_argument("--save-audio", default=None, help="Write the spoken summary to a WAV file.")
    return parser.parse_args(argv)


def build_backend(relay_url: Optional[str]) -> LocatorBackend:
    if relay_url:
        from .backends.relay import RelayBackend

        return RelayBackend(base_url=relay_url, path=settings.relay.path, timeout=settings.relay.timeout)

    from .backends.direct import DirectBackend
    from .genai_client import GeminiClient
    from .analysis.service import LocationInferenceClient
    from .speech import SpeechSynthesisClient

    client = GeminiClient(settings.gemini)
    return DirectBackend(
        inference=LocationInferenceClient(client=client),
        synthesis=SpeechSynthesisClient(client=client),
    )


async def run_locate(args: argparse.Namespace, backend: LocatorBackend) -> int:
    session = LocatorSession(backend, tts_language=args.lang)
    if args.lat is not None and args.lon is not None:
        session.tracker.update(args.lat, args.lon)

    try:
        result = await session.analyze(args.file, mime_type=args.mime_type)
        if result is None:
            print(f"Error: {session.error}", file=sys.stderr)
            return EXIT_ANALYSIS_FAILED

        print(format_result(result, args.lang))

        if session.audio_error:
            print(f"Could not generate audio: {session.audio_error}", file=sys.stderr)
            return EXIT_OK

        if args.save_audio and session.audio_buffer is not None:
            from .audio.export import write_wav

            try:
                target = write_wav(session.audio_buffer, args.save_audio)
                print(f"Audio saved to {target}")
            except LocatorError as exc:
                logger.warning("cli.audio.save_failed", extra={"error": repr(exc)})
                print(f"Could not save audio: {exc.user_message}", file=sys.stderr)

        if args.play:
            try:
                if session.play():
                    await session.wait_for_playback()
            except LocatorError as exc:
                logger.warning("cli.audio.play_failed", extra={"error": repr(exc)})
                print(f"Could not play audio: {exc.user_message}", file=sys.stderr)
        return EXIT_OK
    finally:
        await session.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging()

    if args.command == "serve":
        from .relay.app import main as serve_main

        try:
            serve_main(host=args.host, port=args.port)
        except ConfigurationError as exc:
            logger.error("cli.config.invalid", extra={"error": str(exc)})
            print(f"Configuration error: {exc}", file=sys.stderr)
            return EXIT_CONFIG_ERROR
        return EXIT_OK

    try:
        backend = build_backend(args.relay_url)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    return asyncio.run(run_locate(args, backend))


if __name__ == "__main__":
    sys.exit(main())
