from .config import SolverConfig, get_solver_config, set_solver_config
from .model import Angle, Circle, Edge, GeometryModel, Line, Point, angle_name
from .serializer import (
    GeometryDataError,
    deserialize_geometry_data,
    enrich_geometry_data,
    load_geometry,
    serialize_geometry_data,
    validate_geometry_data,
)
from .partitions import Relations
from .validation import ValidationResult, validate_angle_value
from .theorems import RULES, Rule, RuleKind, solve_with_theorems
from .equations import (
    EquationParseError,
    clean_equations_for_wolfram,
    extract_equations,
    generate_wolfram_url,
    solve_with_equation_hybrid,
    solve_with_equations,
    solve_with_equations_rref,
)
from .orchestrator import solve
from .types import (
    AgreementReport,
    EquationSolverResult,
    SolveOptions,
    SolverResults,
    TheoremSolverResult,
)

__all__ = [
    'AgreementReport',
    'Angle',
    'Circle',
    'Edge',
    'EquationParseError',
    'EquationSolverResult',
    'GeometryDataError',
    'GeometryModel',
    'Line',
    'Point',
    'RULES',
    'Relations',
    'Rule',
    'RuleKind',
    'SolveOptions',
    'SolverConfig',
    'SolverResults',
    'TheoremSolverResult',
    'ValidationResult',
    'angle_name',
    'clean_equations_for_wolfram',
    'deserialize_geometry_data',
    'enrich_geometry_data',
    'extract_equations',
    'generate_wolfram_url',
    'get_solver_config',
    'load_geometry',
    'serialize_geometry_data',
    'set_solver_config',
    'solve',
    'solve_with_equation_hybrid',
    'solve_with_equations',
    'solve_with_equations_rref',
    'solve_with_theorems',
    'validate_angle_value',
]
