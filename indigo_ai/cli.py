# indigo_ai/cli.py
import argparse
import logging
import sys
from typing import List, Optional

from indigo_ai.capabilities.home_control.tools import print_device_info, print_device_list
from indigo_ai.core.config import Settings, settings as default_settings
from indigo_ai.core.errors import ConfigError, IndigoAIError
from indigo_ai.core.iot import IndigoClient
from indigo_ai.core.llm import get_llm
from indigo_ai.orchestrator.graph import build_query_graph, run_query

logger = logging.getLogger(__name__)

VERBOSITY_LEVELS = {0: logging.ERROR, 1: logging.INFO, 2: logging.DEBUG}

USAGE_HINT = "No command specified. Use -list to list devices or -device <device name> to get device information."


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="indigo-ai",
        description="Query and control Indigo devices, optionally through an LLM.",
        allow_abbrev=False,
    )
    parser.add_argument("-ip", default=settings.INDIGO_IP, help="IP address of API")
    parser.add_argument("-port", default=settings.INDIGO_PORT, help="Port of API")
    parser.add_argument("-list", action="store_true", help="List all devices")
    parser.add_argument("-device", default="", help="Device path, e.g. /devices/office-lamp")
    parser.add_argument("-AI", dest="ai", action="store_true", help="Ask the AI to act on -queryText")
    parser.add_argument("-queryText", default="Are the kitchen lights on?", help="The question you want to ask the AI")
    parser.add_argument("-alterDeviceState", action="store_true", help="Alter device state flag")
    parser.add_argument("-deviceState", default="", help="State of the device: on, off, or dim")
    parser.add_argument("-deviceStateParam", default="", help="Parameter for device state: brightness level for 'dim'")
    parser.add_argument(
        "-verbosity", type=int, choices=sorted(VERBOSITY_LEVELS), default=settings.LOG_VERBOSITY,
        help="0 for Error, 1 for Info, 2 for Debug",
    )
    return parser


def configure_logging(verbosity: int) -> None:
    logging.basicConfig(
        level=VERBOSITY_LEVELS.get(verbosity, logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None, llm=None) -> int:
    settings = settings or default_settings
    args = build_parser(settings).parse_args(argv)
    configure_logging(args.verbosity)

    try:
        client = IndigoClient.from_settings(settings, host=args.ip, port=args.port)
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    try:
        if args.list:
            print_device_list(client.list_devices())
        elif args.device and not args.alterDeviceState:
            print_device_info(client.get_device(args.device))
        elif args.ai:
            graph = build_query_graph(
                client,
                llm=llm or get_llm(settings),
                prompt_dir=settings.PROMPT_DIR,
                selection_template=settings.DEVICE_SELECTION_TEMPLATE,
                desired_state_template=settings.DESIRED_STATE_TEMPLATE,
            )
            result = run_query(graph, args.queryText)
            for path, state in result.get("applied", []):
                print(f"{path}: {state}")
        elif args.alterDeviceState and args.device and args.deviceState:
            detail = client.set_device_state(args.device, args.deviceState, args.deviceStateParam)
            print("Device state altered successfully. New state:")
            print_device_info(detail)
        else:
            print(USAGE_HINT)
    except IndigoAIError as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
