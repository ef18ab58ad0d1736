"""Console logging and batch progress reporting."""
import logging
from tqdm import tqdm

class Colors:
    """ANSI color codes for prettier output."""
    CYAN = '\033[36m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    RED = '\033[31m'
    BLUE = '\033[34m'
    GRAY = '\033[37m'
    BOLD = '\033[1m'
    RESET = '\033[0m'

class Symbols:
    """Unicode symbols for status indicators."""
    CHECK = '✓'
    CROSS = '✗'
    ROCKET = '🚀'
    GEAR = '⚙'
    ROUTE = '🛣'
    CHART = '📊'

LEVEL_COLORS = {
    'DEBUG': Colors.GRAY,
    'INFO': Colors.CYAN,
    'WARNING': Colors.YELLOW,
    'ERROR': Colors.RED,
    'CRITICAL': Colors.RED + Colors.BOLD
}

class SimpleFormatter(logging.Formatter):
    """Message-only formatter colored by level."""
    def format(self, record):
        color = LEVEL_COLORS.get(record.levelname, Colors.RESET)
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"{color}{message}{Colors.RESET}"

def setup_logging(verbose: bool = False):
    """Route all loggers to a single colored console handler."""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(SimpleFormatter())
    logger.addHandler(console)

class ProgressTracker:
    """Progress bar over a batch of instance files."""
    def __init__(self, items, description: str = "Processing instances"):
        self.items = items
        self.pbar = tqdm(
            total=len(items),
            desc=f"{Colors.BLUE}{Symbols.ROUTE} {description}{Colors.RESET}",
            bar_format="{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt}"
        )

        self.status_formats = {
            'success': f"{Colors.GREEN}{Symbols.CHECK}",
            'warning': f"{Colors.YELLOW}{Symbols.GEAR}",
            'error': f"{Colors.RED}{Symbols.CROSS}",
            'info': f"{Colors.CYAN}{Symbols.CHART}",
        }

    def advance(self, message=None, status='success'):
        """Advance progress bar and optionally print a status line."""
        if message:
            prefix = self.status_formats.get(status, '')
            self.pbar.write(f"{prefix} {message}{Colors.RESET}")
        self.pbar.update(1)

    def close(self, summary: str = "Batch completed!"):
        self.pbar.write(f"\n{Colors.GREEN}{Symbols.ROCKET} {summary}{Colors.RESET}\n")
        self.pbar.close()
