"""FlowLab: mass-balance propagation through a minimal process flowsheet.

This package provides:
- Engine: Stream, Mixer, Reactor with recycle detection
- Schemas: pydantic description of a flowsheet
- Services: build/run a described flowsheet, reporting, reference scenarios
- CLI: ``flowlab demo`` and ``flowlab run``
"""

__version__ = "0.1.0"
