from .builder import PhotometryBuilder
from .config import Config
from .dataset import QualifiedName, XYDataset
from .modeling import GridAxes, ModelDataManager, ModelMatrix
from .photometry import Photometry, PhotometryMatrix
from .phz import ModelPhotometry

__version__ = "0.1.0"
