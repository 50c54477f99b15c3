import argparse
import asyncio
import json
import logging
import sys

from pyhydra.proto import InvalidAddress, ScriptPolicy, derive_multisig

from .config import HydraConfig
from .errors import HydraError
from .session import SessionState
from .snapshot import UtxoSnapshotIndexer
from .wrangler import head_status, shutdown_head

logger = logging.getLogger("pyhydra.client")


def cmd_status(config: HydraConfig, args) -> int:
    status = asyncio.run(head_status(config))
    print(json.dumps({'status': status}))
    return 0


def cmd_shutdown(config: HydraConfig, args) -> int:
    closer = shutdown_head(config)
    state = asyncio.run(closer.run())
    print(json.dumps({
        'state': state.value,
        'status': closer.session.status.value if closer.session.status else None,
        'commands': closer.session.commands,
        'error': str(closer.session.error) if closer.session.error else None,
    }))
    return 0 if state is SessionState.COMPLETED else 1


def cmd_utxos(config: HydraConfig, args) -> int:
    config.require('api_url')
    indexer = UtxoSnapshotIndexer(config.api_url, timeout=config.timeout)
    utxos = indexer.query_by_address(args.address)
    print(json.dumps({'address': args.address, 'utxos': [u.to_json() for u in utxos]}, indent=2))
    return 0


def cmd_address(config: HydraConfig, args) -> int:
    network = config.network_id if args.network is None else args.network
    policy = ScriptPolicy.ALL if args.all else ScriptPolicy.ANY
    script = derive_multisig(args.address1, args.address2, network, policy)
    print(json.dumps(script.to_json(), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='hydra-wrangler',
                                     description='Open, close and inspect a Hydra head')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('status', help='print the head status the node greets us with')
    sub.add_parser('shutdown', help='close the head and fan out, waiting until finalized')

    p = sub.add_parser('utxos', help='list snapshot UTxOs held by an address')
    p.add_argument('address')

    p = sub.add_parser('address', help='derive the 2-key multisig script and address')
    p.add_argument('address1')
    p.add_argument('address2')
    p.add_argument('--all', action='store_true', help='require both signatures (default: either)')
    p.add_argument('--network', type=int, choices=[0, 1], default=None,
                   help='0 = testnet, 1 = mainnet (default: HYDRA_NETWORK_ID)')
    return parser


COMMANDS = {
    'status': cmd_status,
    'shutdown': cmd_shutdown,
    'utxos': cmd_utxos,
    'address': cmd_address,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.StreamHandler()
        ]
    )
    try:
        config = HydraConfig.from_env()
        return COMMANDS[args.command](config, args)
    except (HydraError, InvalidAddress, asyncio.TimeoutError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1


if __name__ == '__main__':
    sys.exit(main())
