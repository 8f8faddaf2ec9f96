"""Block Staking CLI."""
from contextlib import contextmanager
from pathlib import Path
from typing import Optional
import click
from loguru import logger

from .core.config import StakingConfig, configure_logging
from .core.devnet import Devnet
from .core.errors import StakingError, TokenError, DevnetError


@contextmanager
def open_devnet(config: StakingConfig, save: bool = True):
    """Load the devnet, hand it to a command and persist it on success."""
    try:
        devnet = Devnet.load(config.state_path)
        yield devnet
    except (StakingError, TokenError, DevnetError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        if e.__cause__ is not None:
            logger.debug(f"Caused by {type(e.__cause__).__name__}: {e.__cause__}")
        raise click.exceptions.Exit(1)
    if save:
        devnet.save(config.state_path)


@click.group()
@click.version_option(package_name="block-staking")
@click.option('--home', type=click.Path(file_okay=False, path_type=Path), default=None,
              help='State directory (defaults to $BLOCK_STAKING_HOME or ~/.block-staking)')
@click.pass_context
def cli(ctx, home: Optional[Path]):
    """Block Staking CLI for running a single reward pool on a local devnet."""
    config = StakingConfig.load(home)
    configure_logging(config.log_level)
    ctx.obj = config


@cli.command()
@click.option('--owner', default='owner', help='Account that deploys the tokens and owns the pool')
@click.option('--name', default='Pickle', help='Staking token name')
@click.option('--symbol', default='PICK', help='Staking token symbol')
@click.option('--supply', default=1_000_000, help='Staking token supply, minted to the owner')
@click.option('--reward-name', default='Rick', help='Reward token name')
@click.option('--reward-symbol', default='RICK', help='Reward token symbol')
@click.option('--reward-supply', default=1_000_000, help='Reward token supply, minted to the owner')
@click.option('--force', is_flag=True, help='Overwrite an existing devnet')
@click.pass_obj
def init(config: StakingConfig, owner: str, name: str, symbol: str, supply: int,
         reward_name: str, reward_symbol: str, reward_supply: int, force: bool):
    """Create a devnet with a staking token, a reward token and a pool."""
    if config.state_path.exists() and not force:
        logger.error(f"Devnet already exists at {config.state_path}. Use --force to replace it")
        raise click.exceptions.Exit(1)
    try:
        devnet = Devnet()
        devnet.deploy_token(name, symbol, supply, owner)
        devnet.deploy_token(reward_name, reward_symbol, reward_supply, owner)
        pool = devnet.deploy_pool(symbol, owner)
    except (StakingError, TokenError, DevnetError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        raise click.exceptions.Exit(1)
    devnet.save(config.state_path)
    click.echo(f"Pool {pool.address} accepts {symbol}, owned by {owner}")


@cli.command()
@click.argument('token')
@click.argument('to')
@click.argument('amount', type=int)
@click.option('--from', 'sender', required=True, help='Sending account')
@click.pass_obj
def transfer(config: StakingConfig, token: str, to: str, amount: int, sender: str):
    """Transfer AMOUNT of TOKEN to account TO."""
    with open_devnet(config) as devnet:
        devnet.token(token).transfer(sender, to, amount)
        click.echo(f"Transferred {amount} {token} from {sender} to {to}")


@cli.command()
@click.argument('token')
@click.argument('amount', type=int)
@click.option('--from', 'sender', required=True, help='Approving account')
@click.option('--spender', default=None, help='Spender (defaults to the pool)')
@click.pass_obj
def approve(config: StakingConfig, token: str, amount: int, sender: str, spender: Optional[str]):
    """Allow the pool (or SPENDER) to move AMOUNT of TOKEN."""
    with open_devnet(config) as devnet:
        spender = spender or devnet.require_pool().address
        devnet.token(token).approve(sender, spender, amount)
        click.echo(f"{sender} approved {spender} for {amount} {token}")


@cli.command()
@click.argument('reward_token')
@click.argument('amount', type=int)
@click.argument('duration', type=int)
@click.option('--from', 'sender', required=True, help='Pool owner')
@click.pass_obj
def fund(config: StakingConfig, reward_token: str, amount: int, duration: int, sender: str):
    """Fund the pool with AMOUNT of REWARD_TOKEN emitted over DURATION blocks."""
    with open_devnet(config) as devnet:
        pool = devnet.require_pool()
        pool.fund(devnet.token(reward_token), amount, duration, sender)
        click.echo(f"Reward rate: {pool.reward_rate} {reward_token}/block until block #{pool.end_rewards_block}")


@cli.command()
@click.argument('amount', type=int)
@click.option('--from', 'sender', required=True, help='Staking account')
@click.pass_obj
def stake(config: StakingConfig, amount: int, sender: str):
    """Stake AMOUNT of the staking token."""
    with open_devnet(config) as devnet:
        pool = devnet.require_pool()
        pool.stake(amount, sender)
        click.echo(f"Deposit: {pool.deposit_amount(sender)} {pool.staking_token_address}")


@cli.command()
@click.argument('amount', type=int)
@click.option('--from', 'sender', required=True, help='Staking account')
@click.pass_obj
def withdraw(config: StakingConfig, amount: int, sender: str):
    """Withdraw AMOUNT of staked tokens."""
    with open_devnet(config) as devnet:
        pool = devnet.require_pool()
        pool.withdraw(amount, sender)
        click.echo(f"Deposit: {pool.deposit_amount(sender)} {pool.staking_token_address}")


@cli.command()
@click.option('--from', 'sender', required=True, help='Staking account')
@click.pass_obj
def claim(config: StakingConfig, sender: str):
    """Claim accrued rewards."""
    with open_devnet(config) as devnet:
        pool = devnet.require_pool()
        paid = pool.claim(sender)
        click.echo(f"Claimed {paid} {pool.reward_token_address or 'reward'}")


@cli.command()
@click.argument('blocks', type=int, default=1)
@click.pass_obj
def mine(config: StakingConfig, blocks: int):
    """Advance the devnet by BLOCKS blocks."""
    if blocks < 0:
        logger.error("Cannot mine a negative number of blocks")
        raise click.exceptions.Exit(1)
    with open_devnet(config) as devnet:
        devnet.mine(blocks)
        click.echo(f"Block #{devnet.block}")


@cli.command()
@click.argument('account')
@click.pass_obj
def balance(config: StakingConfig, account: str):
    """Show ACCOUNT balances for every token."""
    with open_devnet(config, save=False) as devnet:
        click.echo(f"\nBalances for {account}:")
        click.echo("-" * 40)
        for address, token in sorted(devnet.tokens.items()):
            click.echo(f"{address:<20}{token.balance_of(account):>20}")


@cli.command()
@click.option('--account', default=None, help='Also show this participant\'s deposit')
@click.pass_obj
def status(config: StakingConfig, account: Optional[str]):
    """Show pool configuration and totals."""
    with open_devnet(config, save=False) as devnet:
        pool = devnet.require_pool()
        click.echo(f"\nPool {pool.address} at block #{devnet.block}")
        click.echo("-" * 40)
        click.echo(f"Owner: {pool.owner}")
        click.echo(f"Staking Token: {pool.staking_token_address}")
        click.echo(f"Reward Token: {pool.reward_token_address or 'not funded'}")
        click.echo(f"Reward Rate: {pool.reward_rate}")
        click.echo(f"End Rewards Block: {pool.end_rewards_block}")
        click.echo(f"Total Staked: {pool.total_staked}")

        if account:
            click.echo(f"\n{account}:")
            click.echo(f"  State: {pool.participant_state(account).value}")
            click.echo(f"  Deposit: {pool.deposit_amount(account)}")
            click.echo(f"  Checkpoint Block: {pool.deposit_checkpoint_block(account)}")
            click.echo(f"  Pending Reward: {pool.pending_reward(account)}")


if __name__ == "__main__":
    cli()
