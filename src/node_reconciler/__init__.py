"""
node_reconciler

This package keeps a provisioning service in step with a configuration database.

We keep modules small and well separated:
core contains shared data structures and errors
clients contains one thin wrapper per remote service
transport and tls contain the http plumbing shared by both clients
transform reshapes facts between the two services
reconcile contains the driver for single host and full sync runs
cli wires configuration, logging and the driver together
"""

__version__ = "0.1.0"
