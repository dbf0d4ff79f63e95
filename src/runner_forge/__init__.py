"""runner-forge: install a GitLab Runner on Kubernetes with kubectl and Helm."""

__version__ = "0.1.0"
