"""
main.py — Play and resolve Cognumbers games
===========================================

Wire your encryption and attestation service clients into the
library, then join a game or resolve one.

    python main.py list
    python main.py join 3 7
    python main.py resolve 3

Configuration is read from config.json and COGNUMBERS_* environment
variables (see cognumbers._config.ENV_MAPPINGS).
"""

import asyncio
import sys

from cognumbers import (
    AttestationService,
    CognumbersClient,
    CognumbersError,
    EncryptionService,
    load_config,
    setup_logging,
)
from cognumbers._shared.logging_config import log_error


class MyEncryption(EncryptionService):
    """Replace with a call into your encryption gateway."""

    async def encrypt(self, value, account_address, dapp_address, handle_type):
        raise NotImplementedError("connect your encryption service here")


class MyAttestation(AttestationService):
    """Replace with a call into your attested decryption service."""

    async def attested_decrypt(self, wallet, handles):
        raise NotImplementedError("connect your attestation service here")


def print_phase(game_id, phase):
    print(f"  game {game_id}: {phase.value}")


async def run(client: CognumbersClient, argv):
    command = argv[0] if argv else "list"
    if command == "list":
        for game in await client.list_games():
            print(f"#{game.game_id} {game.status.name} players={game.player_count}")
    elif command == "join":
        tx = await client.join_game(int(argv[1]), int(argv[2]))
        print(f"Joined: {tx}")
    elif command == "resolve":
        outcome = await client.resolve_game(int(argv[1]))
        if outcome.winner:
            print(f"Winner {outcome.winner} with {outcome.winning_number}")
        else:
            print("No unique number")
        print(f"Final status: {outcome.final_status.name if outcome.final_status else '?'}")
    else:
        print(f"Unknown command {command}")


def main():
    config = load_config("config.json")
    setup_logging(config.log_file, config.log_level)
    client = CognumbersClient(
        config,
        encryption=MyEncryption(),
        attestation=MyAttestation(),
        phase_listener=print_phase,
    )
    try:
        asyncio.run(run(client, sys.argv[1:]))
    except CognumbersError as e:
        log_error(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
