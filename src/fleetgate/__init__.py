"""Fleet Upgrade Gate (fleetgate).

Track fleet node state, resolve which barclamp roles may run on which node, and gate
fleet-wide platform upgrades behind distributed health and compatibility checks.
"""

__version__ = "0.1.0"
__author__ = "Cloud Platform Team"
__license__ = "Apache-2.0"
