"""Bundled template resources for agentbootstrap.

- project/: the configuration tree copied by ``agentbootstrap init``
  (CLAUDE.md, .mcp.json and .claude/ settings, agents, commands, skills).

Templates are accessed via the infrastructure.resources module.
"""
