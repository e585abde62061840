"""
Unused Class Finder Module
Pairs every CSS module with its component and reports the classes the
component never references.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple, Union

from utils.file_utils import LocalFileReader, find_files, suffix_pattern

from .class_reference_extractor import ClassReferenceExtractor
from .config import DEFAULT_CONFIG, DetectorConfig
from .errors import ParseError, UnpairedFileWarning
from .scss_class_extractor import extract_declared_classes

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class FilePairing:
    style_path: str
    markup_path: str


@dataclass
class PairResult:
    style_path: str
    markup_path: str
    declared: Set[str] = field(default_factory=set)
    referenced: Set[str] = field(default_factory=set)

    @property
    def unused(self) -> Set[str]:
        return self.declared - self.referenced

    def to_dict(self) -> Dict:
        return {
            'style_path': self.style_path,
            'markup_path': self.markup_path,
            'declared': sorted(self.declared),
            'referenced': sorted(self.referenced),
            'unused': sorted(self.unused),
        }


@dataclass
class UnusedClassReport:
    pairs: Dict[str, PairResult] = field(default_factory=dict)
    warnings: List[Union[UnpairedFileWarning, ParseError]] = field(default_factory=list)

    @property
    def unused(self) -> Dict[str, Set[str]]:
        return {path: pair.unused for path, pair in self.pairs.items()}

    @property
    def unused_count(self) -> int:
        return sum(len(pair.unused) for pair in self.pairs.values())

    def to_dict(self) -> Dict:
        warnings = []
        for warning in self.warnings:
            if isinstance(warning, ParseError):
                warnings.append({'type': 'parse_error', 'path': warning.path, 'line': warning.line,
                                 'column': warning.column, 'message': warning.message})
            else:
                warnings.append({'type': 'unpaired_file', 'path': warning.style_path, 'message': str(warning)})
        return {
            'files': [pair.to_dict() for pair in self.pairs.values()],
            'unused_count': self.unused_count,
            'warnings': warnings,
        }


def markup_candidates(style_path: PathLike, config: DetectorConfig = DEFAULT_CONFIG) -> List[str]:
    """Component paths that may pair with ``style_path``, in order of preference."""
    path = Path(style_path)
    suffix = config.style_suffix_for(path)
    if suffix:
        base = path.name[:-len(suffix)]
    else:
        base = path.stem
        if base.endswith('.module'):
            base = base[:-len('.module')]
    return [str(path.with_name(base + markup_suffix)) for markup_suffix in config.markup_suffixes]


def pair_style_file(style_path: PathLike, file_reader, config: DetectorConfig = DEFAULT_CONFIG) -> Optional[FilePairing]:
    """Return the pairing for ``style_path``, or None when no component file exists."""
    for candidate in markup_candidates(style_path, config):
        if file_reader.exists(candidate):
            return FilePairing(str(style_path), candidate)
    return None


def _read(file_reader, path: str) -> str:
    try:
        return file_reader.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f'Cannot read file: {e}', path=path) from e


def diff_pair(pairing: FilePairing, file_reader, config: DetectorConfig = DEFAULT_CONFIG) -> PairResult:
    """Extract declared and referenced classes of one pair. Raises ParseError."""
    style_text = _read(file_reader, pairing.style_path)
    markup_text = _read(file_reader, pairing.markup_path)
    try:
        declared = extract_declared_classes(style_text)
    except ParseError as e:
        raise e.with_path(pairing.style_path) from e
    try:
        referenced = ClassReferenceExtractor(config).extract_classes(markup_text)
    except ParseError as e:
        raise e.with_path(pairing.markup_path) from e
    return PairResult(pairing.style_path, pairing.markup_path, declared, referenced)


def process_style_file(style_path: PathLike, file_reader,
                       config: DetectorConfig = DEFAULT_CONFIG) -> Tuple[Optional[PairResult], Optional[Exception]]:
    """Run one style file through pairing, extraction and diff without raising."""
    style_path = str(style_path)
    pairing = pair_style_file(style_path, file_reader, config)
    if pairing is None:
        warning = UnpairedFileWarning(style_path, markup_candidates(style_path, config))
        logger.warning(str(warning))
        return None, warning
    try:
        result = diff_pair(pairing, file_reader, config)
    except ParseError as e:
        logger.warning(f'Skipping {style_path}: {e}')
        return None, e
    logger.debug(f'{style_path}: {len(result.declared)} declared, {len(result.referenced)} referenced, '
                 f'{len(result.unused)} unused')
    return result, None


def analyze_style_files(style_files: Iterable[PathLike], file_reader=None,
                        config: Optional[DetectorConfig] = None) -> UnusedClassReport:
    """Pair, extract and diff every style file, collecting warnings instead of raising."""
    file_reader = file_reader or LocalFileReader()
    config = config or DEFAULT_CONFIG
    style_files = list(style_files)

    def run(path):
        return process_style_file(path, file_reader, config)

    if config.max_workers and config.max_workers > 1 and len(style_files) > 1:
        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            outcomes = list(pool.map(run, style_files))
    else:
        outcomes = [run(path) for path in style_files]

    report = UnusedClassReport()
    for result, warning in outcomes:
        if result is not None:
            report.pairs[result.style_path] = result
        if warning is not None:
            report.warnings.append(warning)
    logger.info(f'Analyzed {len(report.pairs)} of {len(style_files)} style files, '
                f'{report.unused_count} unused classes, {len(report.warnings)} warnings')
    return report


def compute_unused_classes(style_files: Iterable[PathLike], file_reader=None,
                           config: Optional[DetectorConfig] = None) -> Dict[str, Set[str]]:
    """Map each successfully paired style file to the classes its component never references."""
    return analyze_style_files(style_files, file_reader, config).unused


def analyze_workspace(root_path: PathLike, file_reader=None, config: Optional[DetectorConfig] = None,
                      discover: Callable = find_files) -> UnusedClassReport:
    """Discover every style module under ``root_path`` and analyze it."""
    config = config or DEFAULT_CONFIG
    style_files = discover(root_path, suffix_pattern(config.style_suffixes))
    logger.debug(f'Found {len(style_files)} style modules under {root_path}')
    return analyze_style_files(style_files, file_reader, config)


def find_unused_classes(root_path: PathLike, file_reader=None,
                        config: Optional[DetectorConfig] = None) -> Dict[str, Set[str]]:
    return analyze_workspace(root_path, file_reader, config).unused
