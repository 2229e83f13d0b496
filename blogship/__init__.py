"""Blogship build-and-deploy pipeline.

This package drives an external static-site generator (Hugo by default) to
compile a blog's content tree, serves a local preview through the generator,
and publishes the rendered output tree by committing it and pushing it to
the hosting branch of its own git repository.

The main entry point is the CLI module, which provides the build, serve and
deploy commands.

Architecture:
- settings: blogship.yaml loading and CLI overrides.
- process: executable discovery and child-process invocation.
- generator: the Generate and Serve stages.
- publish: the Publish stage (stage, guarded commit, push).
- tasks: the typed task graph that sequences stages and stops on first failure.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
