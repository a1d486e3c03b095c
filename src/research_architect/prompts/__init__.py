"""
Prompt text for the facility generation calls.

- shared_prompts: global constraints, language and output directives used by every facility
- facility_prompts: per-facility purpose, JSON output requirements and default directives
"""
