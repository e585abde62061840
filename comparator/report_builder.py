"""
Report Builder Module
Generates unused class reports as diagnostics, JSON, or HTML (Jinja2 templates).
"""

import json
import logging
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, List

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.unused_class_finder import UnusedClassReport
from utils.file_utils import LocalFileReader

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / 'templates'


@dataclass
class Occurrence:
    line: int
    column: int
    end_column: int
    offset: int


@dataclass
class Diagnostic:
    path: str
    class_name: str
    line: int
    column: int
    end_column: int
    message: str

    def format(self) -> str:
        return f'{self.path}:{self.line}:{self.column}: {self.message}'


def locate_class_occurrences(text: str, class_name: str) -> List[Occurrence]:
    """Find every ``.class_name`` selector in a style sheet, 1-based positions."""
    pattern = re.compile(r'\.' + re.escape(class_name) + r'(?![\w-])')
    occurrences = []
    for match in pattern.finditer(text):
        line_start = text.rfind('\n', 0, match.start()) + 1
        line = text.count('\n', 0, match.start()) + 1
        column = match.start() - line_start + 1
        occurrences.append(Occurrence(line, column, column + len(match.group(0)), match.start()))
    return occurrences


class ReportBuilder:
    def __init__(self, file_reader=None):
        self.env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)),
                               autoescape=select_autoescape(['html']))
        self.file_reader = file_reader or LocalFileReader()
        self.report = UnusedClassReport()
        self.diagnostics: List[Diagnostic] = []

    def collect_metrics(self, report: UnusedClassReport) -> List[Diagnostic]:
        """Turn each unused class into diagnostics pointing at its selectors."""
        self.report = report
        self.diagnostics = []
        for style_path, pair in report.pairs.items():
            if not pair.unused:
                continue
            try:
                text = self.file_reader.read_text(style_path)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f'Cannot re-read {style_path} to locate unused classes: {e}')
                text = ''
            for class_name in sorted(pair.unused):
                message = f"Unused class '{class_name}'"
                occurrences = locate_class_occurrences(text, class_name)
                if not occurrences:
                    # Declared through a selector the literal search cannot see, e.g. `.a.b`
                    self.diagnostics.append(Diagnostic(style_path, class_name, 1, 1, 1, message))
                for occ in occurrences:
                    self.diagnostics.append(
                        Diagnostic(style_path, class_name, occ.line, occ.column, occ.end_column, message))
        return self.diagnostics

    def summary(self) -> Dict:
        return {
            'files_analyzed': len(self.report.pairs),
            'files_with_unused': sum(1 for pair in self.report.pairs.values() if pair.unused),
            'unused_count': self.report.unused_count,
            'warnings': len(self.report.warnings),
        }

    def generate_text_report(self) -> str:
        lines = [d.format() for d in self.diagnostics]
        lines.extend(f'warning: {w}' for w in self.report.warnings)
        s = self.summary()
        lines.append(f"{s['unused_count']} unused classes in {s['files_with_unused']} of "
                     f"{s['files_analyzed']} files")
        return '\n'.join(lines) + '\n'

    def generate_json_report(self) -> str:
        data = self.report.to_dict()
        data['summary'] = self.summary()
        data['diagnostics'] = [asdict(d) for d in self.diagnostics]
        return json.dumps(data, indent=2)

    def generate_html_report(self) -> str:
        template = self.env.get_template('unused_report.html')
        return template.render(
            summary=self.summary(),
            files=[pair.to_dict() for pair in self.report.pairs.values()],
            diagnostics=self.diagnostics,
            warnings=[str(w) for w in self.report.warnings],
        )

    def render(self, fmt: str = 'text') -> str:
        renderers = {
            'text': self.generate_text_report,
            'json': self.generate_json_report,
            'html': self.generate_html_report,
        }
        if fmt not in renderers:
            raise ValueError(f'Unknown report format: {fmt}')
        return renderers[fmt]()

    def write(self, output_path, fmt: str = 'text') -> None:
        Path(output_path).write_text(self.render(fmt), encoding='utf-8')
        logger.info(f'Report written to {output_path}')
