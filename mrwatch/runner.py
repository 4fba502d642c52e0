"""One fetch-classify-present-notify cycle."""

from mrwatch.aggregator import collect
from mrwatch.client import GitLabClient
from mrwatch.config import WatchConfig
from mrwatch.logging import get_logger
from mrwatch.notifier import Notifier, SlackNotifier
from mrwatch.presenter import format_report

logger = get_logger("runner")


async def run_once(
    config: WatchConfig,
    client: GitLabClient | None = None,
    notifier: Notifier | None = None,
    dry_run: bool = False,
) -> str:
    """
    Build the report and hand it to the notifier.

    Args:
        config: Run configuration
        client: GitLab client to read through (default: built from config and closed afterwards)
        notifier: Sink for the message (default: Slack, built from config)
        dry_run: Render the message without sending it

    Returns:
        The rendered message

    Raises:
        UpstreamFetchError: If a read the current mode cannot recover from fails
        NotificationError: If the message could not be delivered
        ConfigurationError: If the Slack settings are missing and no notifier is given
    """
    if not dry_run and notifier is None:
        notifier = SlackNotifier.from_config(config)

    logger.info("Checking merge requests...")
    if client is None:
        async with GitLabClient.from_config(config) as owned_client:
            report = await collect(owned_client, config)
    else:
        report = await collect(client, config)

    message = format_report(report)
    logger.info("Report has %d merge requests (%d more not shown)", len(report.items), report.remaining)

    if notifier is not None and not dry_run:
        await notifier.send(message)
    return message
