from .grid import GridDimensions, pack, unpack, wrap
from .layers import FieldPair, DoubleBuffer
from .errors import WavegridError, AllocationError, ExecutionError
from .executor import KernelSpec, KernelExecutor, NumbaExecutor, NumpyExecutor, get_executor
from .simulation import Simulation, WaveConfig
