"""CLI entry point for the interview preparedness scoring service."""

import argparse
import json
import logging
import sys

from careerprep.core.config import Settings
from careerprep.core.db import init_db
from careerprep.core.errors import PredictionError


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML file (default: built-in defaults)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Interview preparedness scoring - predict interview success from preparation data",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- init-db ---
    init_parser = subparsers.add_parser("init-db", help="Create the database schema")
    _add_common(init_parser)

    # --- predict ---
    predict_parser = subparsers.add_parser(
        "predict",
        help="Generate and store a success prediction for an interview",
    )
    predict_parser.add_argument("--user-id", required=True, help="Owner of the interview")
    predict_parser.add_argument("--interview-id", required=True, help="Interview to score")
    predict_parser.add_argument("--job-id", required=True, help="Job the interview belongs to")
    predict_parser.add_argument(
        "--provider",
        choices=["anthropic", "openai", "gemini", "ollama"],
        help="Override the LLM provider from settings",
    )
    _add_common(predict_parser)

    # --- latest ---
    latest_parser = subparsers.add_parser(
        "latest",
        help="Show the most recent stored prediction for an interview",
    )
    latest_parser.add_argument("--user-id", required=True)
    latest_parser.add_argument("--interview-id", required=True)
    _add_common(latest_parser)

    # --- accuracy ---
    accuracy_parser = subparsers.add_parser(
        "accuracy",
        help="Compare stored predictions with real interview outcomes",
    )
    accuracy_parser.add_argument("--user-id", required=True)
    _add_common(accuracy_parser)

    # --- ab-test ---
    ab_parser = subparsers.add_parser(
        "ab-test",
        help="Check statistical significance between two variants",
    )
    ab_parser.add_argument("--a-total", type=int, required=True, help="Applications sent with A")
    ab_parser.add_argument("--a-success", type=int, required=True, help="Responses to A")
    ab_parser.add_argument("--b-total", type=int, required=True, help="Applications sent with B")
    ab_parser.add_argument("--b-success", type=int, required=True, help="Responses to B")
    ab_parser.add_argument(
        "--min-samples",
        type=int,
        default=10,
        help="Minimum applications per variant (default: 10)",
    )
    _add_common(ab_parser)

    # --- serve ---
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Override api.host from settings")
    serve_parser.add_argument("--port", type=int, help="Override api.port from settings")
    _add_common(serve_parser)

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_settings(path: str | None) -> Settings:
    return Settings.from_yaml(path) if path else Settings()


def cmd_init_db(settings: Settings) -> None:
    conn = init_db(settings.database.path)
    conn.close()
    print(f"Database ready at {settings.database.path}")


def cmd_predict(args: argparse.Namespace, settings: Settings) -> None:
    """Handle predict subcommand."""
    from careerprep.pipeline.predictor import predict_interview_success

    if args.provider:
        settings = settings.model_copy(
            update={"llm": settings.llm.model_copy(update={"provider": args.provider})}
        )

    conn = init_db(settings.database.path)
    try:
        prediction = predict_interview_success(
            conn, args.user_id, args.interview_id, args.job_id, settings,
        )
    finally:
        conn.close()

    print(f"Overall probability: {prediction.overall_probability}% "
          f"({prediction.confidence_level} confidence, {prediction.predicted_outcome})")
    print(prediction.model_dump_json(indent=2))


def cmd_latest(args: argparse.Namespace, settings: Settings) -> None:
    from careerprep.pipeline.predictor import latest_prediction

    conn = init_db(settings.database.path)
    try:
        prediction = latest_prediction(conn, args.user_id, args.interview_id)
    finally:
        conn.close()

    if prediction is None:
        print(f"No prediction stored for interview {args.interview_id}")
        return
    print(prediction.model_dump_json(indent=2))


def cmd_accuracy(args: argparse.Namespace, settings: Settings) -> None:
    """Handle accuracy subcommand."""
    from careerprep.pipeline.accuracy import analyze_prediction_accuracy

    conn = init_db(settings.database.path)
    try:
        report = analyze_prediction_accuracy(conn, args.user_id)
    finally:
        conn.close()

    if report.stats is None:
        print("No completed interviews with outcomes yet.")
        return

    s = report.stats
    print(f"Accuracy: {s.accuracy_rate}% ({s.accurate}/{s.total} predictions)")
    print(f"  Positive predictions: {s.positive_predictions} "
          f"({s.positive_accuracy_rate}% accurate)")
    print(f"  Negative predictions: {s.negative_predictions} "
          f"({s.negative_accuracy_rate}% accurate)")
    print(f"  Avg probability when correct: {s.avg_confidence_when_correct}%")
    print(f"  Avg probability when incorrect: {s.avg_confidence_when_incorrect}%")
    for c in report.comparisons:
        mark = "n/a" if c.is_accurate is None else ("ok" if c.is_accurate else "miss")
        print(f"  {c.interview.id} [{c.interview.outcome}] -> {mark}")


def cmd_ab_test(args: argparse.Namespace) -> None:
    """Handle ab-test subcommand."""
    from careerprep.analytics.ab_testing import (
        VariantCounts,
        determine_winner,
        two_proportion_test,
        winner_by_threshold,
    )

    a = VariantCounts(total=args.a_total, successes=args.a_success)
    b = VariantCounts(total=args.b_total, successes=args.b_success)
    result = two_proportion_test(a, b, min_samples=args.min_samples)
    threshold = winner_by_threshold(a, b)

    print(json.dumps(
        {
            "significance": result.model_dump(),
            "winner": determine_winner(a, b, result, min_samples=args.min_samples),
            "threshold": threshold.model_dump(),
        },
        indent=2,
    ))


def cmd_serve(args: argparse.Namespace, settings: Settings) -> None:
    import uvicorn

    from careerprep.api.app import create_app

    host = args.host or settings.api.host
    port = args.port or settings.api.port
    uvicorn.run(create_app(settings), host=host, port=port)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "init-db":
            cmd_init_db(settings)
        elif args.command == "predict":
            cmd_predict(args, settings)
        elif args.command == "latest":
            cmd_latest(args, settings)
        elif args.command == "accuracy":
            cmd_accuracy(args, settings)
        elif args.command == "ab-test":
            cmd_ab_test(args)
        elif args.command == "serve":
            cmd_serve(args, settings)
    except (PredictionError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
