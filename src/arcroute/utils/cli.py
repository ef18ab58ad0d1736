from argparse import ArgumentParser, RawTextHelpFormatter
from typing import Dict, Any
import sys

from arcroute.config.parameters import Parameters
from arcroute.routing.construction import ConstructionStrategy
from arcroute.routing.local_search import NEIGHBORHOODS
from arcroute.utils.logging import Colors

def print_parameter_help():
    """Display detailed help information about parameters"""
    help_text = f"""
{Colors.BOLD}Arc Routing Solver Parameters{Colors.RESET}
{Colors.CYAN}═════════════════════════════{Colors.RESET}

{Colors.YELLOW}Input:{Colors.RESET}
  --instance PATH          Single instance file (.dat)
                           Example: --instance data/BHW1.dat

  --input-dir DIR          Process every .dat/.txt file in a directory
                           Example: --input-dir data/mggdb

  --mode STR               What to produce for each instance
                           Options:
                             - stats (graph statistics and DOT file)
                             - solve (solution file)
                             - all   (both)
                           Default: all

{Colors.YELLOW}Construction:{Colors.RESET}
  --construction STR       Initial solution strategy
                           Options: cheapest_insertion, one_per_route
                           Default: cheapest_insertion

  --seed INT               Seed for the service order
                           Default: 0

  --shuffle-services       Insert services in a seeded random order
                           Default: False (file order)

{Colors.YELLOW}Local Search:{Colors.RESET}
  --neighborhoods LIST     Neighborhoods to scan, in order
                           Options: relocate, swap, two_opt, merge
                           Default: relocate swap two_opt merge
                           Example: --neighborhoods relocate merge

  --time-limit FLOAT       Local search budget in seconds
                           Default: none (run to a local optimum)

  --max-moves INT          Stop after this many improving moves
                           Default: none

{Colors.YELLOW}Output:{Colors.RESET}
  --results-dir DIR        Output directory
                           Default: results

  --solution-format STR    dat or json
                           Default: dat

  --statistics-format STR  txt or json
                           Default: txt

  --config PATH            Path to custom config file
                           Default: arcroute/config/default_config.yaml
                           Example: --config my_config.yaml

{Colors.YELLOW}Other Options:{Colors.RESET}
  --verbose                Enable debug output (every applied move)

{Colors.CYAN}Examples:{Colors.RESET}
  # Solve one instance with the default configuration
  arcroute --instance data/BHW1.dat --mode solve

  # Statistics for a whole directory
  arcroute --input-dir data/mggdb --mode stats

  # Quick run with a move budget and JSON output
  arcroute --instance data/BHW1.dat --max-moves 100 --solution-format json
"""
    print(help_text)
    sys.exit(0)

def parse_args() -> ArgumentParser:
    """Parse command line arguments for parameter overrides"""
    parser = ArgumentParser(
        description='Heuristic solver for the mixed Capacitated Arc Routing Problem',
        formatter_class=RawTextHelpFormatter
    )

    parser.add_argument(
        '--help-params',
        action='store_true',
        help='Show detailed parameter information and exit'
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument('--instance', type=str, help='Path to a single instance file')
    source.add_argument('--input-dir', type=str, help='Directory of instance files')
    parser.add_argument(
        '--mode',
        type=str,
        choices=['stats', 'solve', 'all'],
        default='all',
        help='stats, solve or all'
    )

    parser.add_argument('--config', type=str, help='Path to custom config file')
    parser.add_argument('--seed', type=int, help='Seed for the service order')
    parser.add_argument(
        '--construction',
        type=str,
        choices=[s.value for s in ConstructionStrategy],
        help='Initial solution strategy'
    )
    parser.add_argument(
        '--shuffle-services',
        action='store_true',
        default=None,
        help='Insert services in a seeded random order'
    )
    parser.add_argument(
        '--neighborhoods',
        nargs='+',
        choices=list(NEIGHBORHOODS),
        help='Local search neighborhoods, in scan order'
    )
    parser.add_argument('--time-limit', type=float, help='Local search budget in seconds')
    parser.add_argument('--max-moves', type=int, help='Maximum number of improving moves')
    parser.add_argument('--results-dir', type=str, help='Output directory')
    parser.add_argument('--solution-format', type=str, choices=['dat', 'json'], help='Solution file format')
    parser.add_argument('--statistics-format', type=str, choices=['txt', 'json'], help='Statistics file format')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose output')

    return parser

def get_parameter_overrides(args) -> Dict[str, Any]:
    """Extract parameter overrides from command line arguments"""
    # Convert args to dictionary, excluding None values
    overrides = {k: v for k, v in vars(args).items() if v is not None}

    # Remove non-parameter arguments
    for key in ['config', 'verbose', 'help_params', 'instance', 'input_dir', 'mode']:
        overrides.pop(key, None)

    # Convert dashed args to underscores
    overrides = {k.replace('-', '_'): v for k, v in overrides.items()}

    return overrides

def load_parameters(args) -> Parameters:
    """Load parameters with optional command line overrides"""
    if args.config:
        params = Parameters.from_yaml(args.config)
    else:
        params = Parameters.from_yaml()

    overrides = get_parameter_overrides(args)

    # Create new Parameters instance with the overrides applied
    if overrides:
        data = params.__dict__.copy()
        data.update(overrides)
        params = Parameters(**data)

    return params
