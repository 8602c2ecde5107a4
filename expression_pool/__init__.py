from .operators import OPERATOR_REGISTRY, PRIMITIVE, Inverse, Operator
from .expression import Expression
from .pool import BuildCancelled, ExpressionPool, IntRange, OutOfRangeError, PoolConfigError
from .evaluator import ExpressionEvaluator, validate_expression
