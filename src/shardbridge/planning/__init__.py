from .planner import PartitionPlanner as PartitionPlanner
