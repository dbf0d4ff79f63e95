"""Deployment orchestration for the GitLab Runner."""
