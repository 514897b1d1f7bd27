from litestar.plugins.htmx import HTMXPlugin
from litestar.plugins.problem_details import ProblemDetailsPlugin
from litestar.plugins.structlog import StructlogPlugin
from litestar_granian import GranianPlugin

from chatsim import config

structlog = StructlogPlugin(config=config.log)
granian = GranianPlugin()
problem_details = ProblemDetailsPlugin(config=config.problem_details)
htmx = HTMXPlugin()
