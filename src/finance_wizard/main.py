"""Command-line entry point."""
import sys
import argparse
from pathlib import Path

from finance_wizard.analysis import FinanceAnalyzer
from finance_wizard.cli.context_setup import full_context_setup
from finance_wizard.cli.interactive import ChatSession
from finance_wizard.config import AppSettings, Config, ConfigManager, SetupWizard, default_app_dir
from finance_wizard.context import ContextManager
from finance_wizard.llm import AdvisorChat
from finance_wizard.tools import ToolExecutor
from finance_wizard.utils.exceptions import FinanceWizardError
from finance_wizard.utils.logger import configure_logging, get_logger
from finance_wizard.ynab import BudgetManager, TransactionCache, YNABClient

logger = get_logger()

CONTEXT_FILE = "user-context.json"
BUDGET_FILE = "budget-config.json"


def _load_and_validate_config(config_manager: ConfigManager) -> Config:
    """Load configuration, launching the setup wizard if keys are missing."""
    config = config_manager.load_config()

    if not config:
        logger.info("No configuration found. Launching setup wizard...")
        config = SetupWizard(config_manager).run()
        if not config:
            raise FinanceWizardError("Setup wizard closed without saving configuration.")

    is_valid, message = config_manager.validate_config(config)
    if not is_valid:
        raise FinanceWizardError(f"Invalid configuration: {message}")

    if config_manager.token_looks_unusual(config.ynab_access_token):
        logger.warning("YNAB access token format looks unusual")

    config.data_path.mkdir(parents=True, exist_ok=True)
    logger.info("Configuration loaded successfully")
    return config


def _build_ynab_client(config: Config, settings: AppSettings, app_dir: Path) -> YNABClient:
    cache = TransactionCache(config.data_path / "cache", max_age_hours=config.cache_duration_hours)
    return YNABClient(
        access_token=config.ynab_access_token,
        cache=cache,
        budget_manager=BudgetManager(app_dir / BUDGET_FILE),
        base_url=settings.ynab_base_url,
        timeout=settings.ynab_timeout_seconds,
        max_retries=settings.retry_max_retries,
        initial_delay=settings.retry_initial_delay_seconds,
        backoff_factor=settings.retry_backoff_factor
    )


def chat_command(config: Config, settings: AppSettings, app_dir: Path, months: int) -> None:
    ynab_client = _build_ynab_client(config, settings, app_dir)
    analyzer = FinanceAnalyzer()
    advisor = AdvisorChat(
        api_key=config.gemini_api_key,
        context_manager=ContextManager(app_dir / CONTEXT_FILE),
        model_name=settings.llm_model_name,
        max_output_tokens=settings.llm_max_output_tokens,
        insights_max_output_tokens=settings.llm_insights_max_output_tokens,
        temperature=settings.llm_temperature,
        max_retries=settings.retry_max_retries
    )
    session = ChatSession(
        ynab_client=ynab_client,
        analyzer=analyzer,
        advisor=advisor,
        executor=ToolExecutor(ynab_client, analyzer),
        analysis_months=months,
        max_history_length=settings.chat_max_history_length,
        recent_transactions=settings.chat_recent_transactions
    )
    session.start()


def sync_command(config: Config, settings: AppSettings, app_dir: Path, months: int) -> None:
    print("Syncing data from YNAB...")
    result = _build_ynab_client(config, settings, app_dir).sync_data(months=months)
    print(f"✓ Synced {result['transaction_count']} transactions for budget: {result['budget_name']}")


def analyze_command(config: Config, settings: AppSettings, app_dir: Path, months: int) -> None:
    print("Analyzing financial data...")
    transactions = _build_ynab_client(config, settings, app_dir).get_transactions(months=months)
    insights = FinanceAnalyzer().analyze_transactions(transactions)

    print(f"✓ Analysis complete ({len(transactions)} transactions)")
    print("Top Savings Opportunities:")
    if not insights.savings_opportunities:
        print("No major savings opportunities identified.")
    for index, opportunity in enumerate(insights.savings_opportunities[:5], start=1):
        print(f"{index}. {opportunity.description} - Potential savings: ${opportunity.potential_savings:.2f}")


def context_command(args: argparse.Namespace, app_dir: Path) -> None:
    context_manager = ContextManager(app_dir / CONTEXT_FILE)

    if args.setup:
        full_context_setup(context_manager)
    elif args.view:
        prompt = context_manager.generate_context_prompt()
        if prompt:
            print("Current User Context:")
            print(prompt)
        else:
            print("No context file found. Use --setup to create one.")
    elif args.clear:
        if context_manager.clear_context():
            print("✓ Context file cleared.")
        else:
            print("No context file to clear.")
    else:
        print("Use --setup, --view, or --clear")


def budget_command(args: argparse.Namespace, config_manager: ConfigManager, settings: AppSettings, app_dir: Path) -> None:
    budget_manager = BudgetManager(app_dir / BUDGET_FILE)

    if args.select:
        config = _load_and_validate_config(config_manager)
        ynab_client = _build_ynab_client(config, settings, app_dir)
        ynab_client.change_budget()
    elif args.view:
        budget_name = budget_manager.get_selected_budget_name()
        if budget_name:
            print(f"Current budget: {budget_name}")
        else:
            print("No budget selected. Use --select to choose one.")
    elif args.clear:
        if budget_manager.clear_budget_config():
            print("✓ Budget selection cleared.")
        else:
            print("No budget selection to clear.")
    else:
        print("Use --select, --view, or --clear")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="finance-wizard",
        description="Interactive CLI for YNAB transaction analysis with AI insights"
    )
    parser.add_argument(
        "command",
        choices=["chat", "sync", "analyze", "context", "budget"],
        help="Command to execute"
    )
    parser.add_argument("-m", "--months", type=int, help="Number of months to analyze")
    parser.add_argument("-s", "--setup", action="store_true", help="Interactive context setup (context)")
    parser.add_argument("--select", action="store_true", help="Select a different budget (budget)")
    parser.add_argument("-v", "--view", action="store_true", help="View current context or budget")
    parser.add_argument("-c", "--clear", action="store_true", help="Clear context or budget selection")
    return parser


def main(argv=None):
    """Main entry point for Finance Wizard."""
    parser = build_parser()
    if argv is None and len(sys.argv) == 1:
        parser.print_help()
        return

    args = parser.parse_args(argv)
    app_dir = default_app_dir()
    config_manager = ConfigManager(app_dir)

    try:
        settings = AppSettings.load()
        configure_logging(
            app_dir / "logs",
            log_level=settings.log_level,
            max_file_size_mb=settings.log_max_file_size_mb,
            backup_count=settings.log_backup_count
        )

        if args.command == "context":
            context_command(args, app_dir)
            return

        if args.command == "budget":
            budget_command(args, config_manager, settings, app_dir)
            return

        config = _load_and_validate_config(config_manager)
        logger.setLevel(config.log_level.upper())
        months = args.months if args.months is not None else config.default_analysis_months
        if months < 1:
            parser.error("--months must be at least 1")

        if args.command == "chat":
            chat_command(config, settings, app_dir, months)
        elif args.command == "sync":
            sync_command(config, settings, app_dir, months)
        elif args.command == "analyze":
            analyze_command(config, settings, app_dir, months)
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except (FinanceWizardError, FileNotFoundError) as e:
        logger.critical(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
