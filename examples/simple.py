"""Simple example/script to print what every Sonos group is playing."""
import argparse
import asyncio
import logging
import os
from os.path import abspath, dirname
from sys import path

path.insert(1, dirname(dirname(abspath(__file__))))

# pylint: disable=wrong-import-position
from sonos_nowplaying.server import SonosNowPlaying

parser = argparse.ArgumentParser(description="Sonos Now Playing")
parser.add_argument(
    "--toggle",
    metavar="group_name",
    help="Pause the named group if it is playing, play it otherwise",
)
parser.add_argument(
    "--debug",
    action="store_true",
    help="Enable verbose debug logging",
)
args = parser.parse_args()


# setup logger
if args.debug:
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)-15s %(levelname)-5s %(name)s -- %(message)s",
    )
    # silence some loggers
    logging.getLogger("asyncio").setLevel(logging.INFO)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


data_dir = os.getenv("APPDATA") if os.name == "nt" else os.path.expanduser("~")
data_dir = os.path.join(data_dir, ".sonos_nowplaying")
if not os.path.isdir(data_dir):
    os.makedirs(data_dir)

hub = SonosNowPlaying(data_dir)


async def main():
    """Handle main execution."""
    await hub.start()
    try:
        for group in await hub.groups.list_groups():
            track = group.track
            print(f"{group.name} [{group.status}] {group.average_volume}%")
            print(f"    {track.artist} - {track.title} ({track.source})")
            if args.toggle and group.name.startswith(args.toggle):
                action = "pause" if group.status == "playing" else "play"
                result = await hub.handle_command(
                    "transport", {"action": action, "group_id": group.id}
                )
                print(f"    {action}: {result.to_dict()}")
    finally:
        await hub.stop()


if __name__ == "__main__":
    asyncio.run(main())
