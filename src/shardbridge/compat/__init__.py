from . import mapreduce as mapreduce
from . import mapred as mapred
