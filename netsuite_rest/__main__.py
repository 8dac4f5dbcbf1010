import argparse
import asyncio
import json
import logging
import sys

from .client import NetSuiteRestClient
from .config import Credentials
from .errors import NetSuiteError

logger = logging.getLogger("netsuite_rest")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="netsuite-rest",
        description="NetSuite REST API client. Credentials are read from NETSUITE_* environment variables.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="Run a SuiteQL, workbook or dataset query; prints one JSON item per line")
    source = search.add_mutually_exclusive_group(required=True)
    source.add_argument("--query", help="SuiteQL query text")
    source.add_argument("--workbook", help="Workbook id")
    source.add_argument("--dataset", help="Dataset id")

    upd = sub.add_parser("update", help="PATCH a record")
    upd.add_argument("--path", required=True, help="Record path, e.g. salesOrder")
    upd.add_argument("--id", required=True, help="Record internal id")
    upd.add_argument("--values", required=True, help="JSON object with the fields to update")
    return parser


async def run_search(client: NetSuiteRestClient, credentials: Credentials, args, out=None) -> int:
    out = out or sys.stdout

    def on_total(total):
        logger.info(f"Total results: {total}")

    count = 0
    async with client.suiteql_search(
        credentials,
        query=args.query,
        workbook=args.workbook,
        dataset=args.dataset,
        on_total_results=on_total,
    ) as stream:
        async for item in stream:
            out.write(json.dumps(item) + "\n")
            count += 1
    logger.info(f"Fetched {count} items in {stream.pages_fetched} pages")
    return 0


async def run_update(client: NetSuiteRestClient, credentials: Credentials, args, out=None) -> int:
    try:
        values = json.loads(args.values)
    except json.JSONDecodeError as e:
        raise NetSuiteError(f"--values is not valid JSON: {e}") from e

    out = out or sys.stdout
    response = await client.update(credentials, id=args.id, update_values=values, path=args.path)
    out.write(json.dumps({"status_code": response.status_code, "body": response.body}) + "\n")
    return 0 if response.ok else 1


async def run(args, client: NetSuiteRestClient = None, credentials: Credentials = None) -> int:
    credentials = credentials or Credentials.from_env()
    client = client or NetSuiteRestClient()
    async with client:
        if args.command == "search":
            return await run_search(client, credentials, args)
        return await run_update(client, credentials, args)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(run(args))
    except NetSuiteError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
