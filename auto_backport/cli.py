import argparse
import logging
import sys

from auto_backport.config import BackportConfig, DEFAULT_FAILURE_LABEL, env_default, split_labels
from auto_backport.event import load_event
from auto_backport.messages import DEFAULT_TITLE_TEMPLATE
from auto_backport.orchestrator import run


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Backport a merged pull request to the branches named in its 'backport <base> [<head>]' labels")
    parser.add_argument('--token', type=str, default=env_default('INPUT_GITHUB_TOKEN', 'GITHUB_TOKEN'),
                        help="GitHub token (default: $INPUT_GITHUB_TOKEN or $GITHUB_TOKEN)")
    parser.add_argument('--event-path', type=str, default=env_default('GITHUB_EVENT_PATH'),
                        help="pull_request event payload (default: $GITHUB_EVENT_PATH)")
    parser.add_argument('--labels', type=str, default=env_default('INPUT_LABELS', default=''),
                        help="comma or newline separated labels to add to each backport PR")
    parser.add_argument('--title-template', type=str,
                        default=env_default('INPUT_TITLE_TEMPLATE', default=DEFAULT_TITLE_TEMPLATE),
                        help="backport PR title, {{base}} and {{originalTitle}} are replaced "
                             "(default: %(default)s)")
    parser.add_argument('--failure-label', type=str,
                        default=env_default('INPUT_FAILURE_LABEL', default=DEFAULT_FAILURE_LABEL),
                        help="label added to the original PR when a backport fails (default: %(default)s)")
    parser.add_argument('--workdir', type=str, default='.',
                        help="directory to clone the repository into (default: %(default)s)")
    parser.add_argument("-l", "--log-level", choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO', help="set the logging level (default: %(default)s)")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format='%(asctime)s - %(levelname)s - %(message)s')

    if not args.token:
        sys.exit("Please set the 'GITHUB_TOKEN' environment variable or pass --token")
    if not args.event_path:
        sys.exit("Please set the 'GITHUB_EVENT_PATH' environment variable or pass --event-path")

    config = BackportConfig(
        token=args.token,
        labels_to_add=split_labels(args.labels),
        title_template=args.title_template,
        failure_label=args.failure_label,
        workdir=args.workdir,
    )
    event = load_event(args.event_path)
    try:
        run(event, config)
    except Exception as e:
        logging.exception(f"Backport aborted: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
