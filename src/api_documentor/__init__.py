"""Document and contract-test web API endpoints."""

from api_documentor.analyzer.base import Endpoint, HttpMethod, Parameter, ParamLocation, ResponseFormat, ResponseSpec
from api_documentor.analyzer.detect import FrameworkType, analyze_app
from api_documentor.config import TesterConfig
from api_documentor.generator.info import ApiInfo
from api_documentor.generator.render import DocumentFormat, generate_documentation
from api_documentor.log import LogLevel, configure_logging
from api_documentor.tester.runner import EndpointTestReport, EndpointTestResult, run_api_endpoints
from api_documentor.tester.schema import ValidationResult, validate_params, validate_response

__version__ = "1.0.0"

__all__ = [
    "ApiInfo",
    "DocumentFormat",
    "Endpoint",
    "EndpointTestReport",
    "EndpointTestResult",
    "FrameworkType",
    "HttpMethod",
    "LogLevel",
    "ParamLocation",
    "Parameter",
    "ResponseFormat",
    "ResponseSpec",
    "TesterConfig",
    "ValidationResult",
    "analyze_app",
    "configure_logging",
    "generate_documentation",
    "run_api_endpoints",
    "validate_params",
    "validate_response",
]
