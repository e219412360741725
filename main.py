import sys
from pathlib import Path

from legallens.utils.config import AppConfig
from legallens.utils.errors import IntakeError
from legallens.utils.logs import configure_logging
from legallens.analysis.pipeline import analyze_upload
from legallens.report.text_export import build_analysis_text

config = AppConfig.from_env()
configure_logging(config.log_level)

if len(sys.argv) != 2:
    print("usage: python main.py <contract.pdf|contract.txt>")
    sys.exit(2)

path = Path(sys.argv[1])
try:
    document = analyze_upload(config, path.name, path.read_bytes())
except IntakeError as e:
    print(f"error: {e.message}")
    sys.exit(1)

print(build_analysis_text(document))
