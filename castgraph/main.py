import argparse
import os
import sys

from dotenv import load_dotenv

from .components.cast_graph_pipeline import CastGraphPipeline


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Cast relationship graph builder')
    parser.add_argument('--list', type=str, default=None, help='Id of the catalog list to graph (required)')
    parser.add_argument('--output', type=str, default='index.html', help='Path of the HTML page to write (default: index.html)')
    parser.add_argument('--title', type=str, default='Viki Cast Graph', help='Page title (default: Viki Cast Graph)')
    parser.add_argument('--cache', action='store_true', help='Memoize every request under CASTGRAPH_CACHE_DIR')
    parser.add_argument('--env', type=str, default='.env', help='Path to environment file (default: .env)')
    parser.add_argument('--quiet', action='store_true', help='Only print the final summary')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    if not args.list:
        print('The --list argument is required', file=sys.stderr)
        return 1

    load_dotenv()
    if os.path.exists(args.env):
        load_dotenv(args.env)

    print("=" * 80)
    print("RUNNING CAST GRAPH".center(80))
    print("=" * 80)
    pipeline = CastGraphPipeline(
        args.list,
        output_path=args.output,
        title=args.title,
        use_cache=args.cache,
        verbose=not args.quiet,
    )
    entry_count, participant_count, node_count, edge_count = pipeline.run()
    print("\n" + "=" * 80)
    print(f"Cast Graph Complete: {entry_count} entries | {participant_count} participants | {node_count} nodes | {edge_count} edges")
    print("=" * 80 + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
