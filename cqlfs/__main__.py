"""
cqlfs administration
"""

import argparse
import asyncio
import inspect
import logging
import sys

from cqlfs.config import ENV_PREFIX, get_settings
from cqlfs.connections import ConnectionRegistry, ConnectivityError
from cqlfs.schema import create_schema


async def run_create_schema(_args) -> None:
    settings = get_settings()
    connections = ConnectionRegistry()
    try:
        await create_schema(connections, settings)
    except ConnectivityError:
        logging.exception(f"Cannot connect to CQL cluster at {settings.cql_host}")
        sys.exit(1)
    finally:
        await connections.close()
    logging.info(f"Keyspace {settings.cql_keyspace} is ready")


def show_config(_args):
    settings = get_settings()
    print(f"# Reading settings from environment and {settings.env_file}")
    for fieldname, fieldinfo in type(settings).model_fields.items():
        value = getattr(settings, fieldname)
        if doc := fieldinfo.description:
            print(f"# {doc}")
        if value is None:
            print(f"#{ENV_PREFIX.upper()}{fieldname.upper()}=\n")
        else:
            value = getattr(value, "value", value)
            print(f"{ENV_PREFIX.upper()}{fieldname.upper()}={value}\n")


def main():
    parser = argparse.ArgumentParser(description=__doc__, prog="python -m cqlfs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    subparsers = parser.add_subparsers(dest="action", title="action", required=True)

    p = subparsers.add_parser("create-schema", help="Create the keyspace and files table if needed")
    p.set_defaults(func=run_create_schema)

    p = subparsers.add_parser("config", help="Show the current configuration")
    p.set_defaults(func=show_config)

    args = parser.parse_args()

    logging.basicConfig(
        format="[%(levelname)-7s:%(name)-15s] %(message)s", level=logging.DEBUG if args.verbose else logging.INFO
    )
    cassandra_logger = logging.getLogger("cassandra")
    cassandra_logger.setLevel(logging.WARNING)

    if inspect.iscoroutinefunction(args.func):
        asyncio.run(args.func(args))
    else:
        args.func(args)


if __name__ == "__main__":
    main()
