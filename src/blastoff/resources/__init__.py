"""Resource files and configuration templates."""


def get_default_config() -> str:
    """Return default configuration YAML content."""
    return """# blastoff Configuration File

# Input files (can be overridden by CLI arguments)
reference: ~
assembly: ~

# Mate-pair simulation
simulation:
  reads: 1000
  seed: 1            # integer 1..9
  min_separation: 100
  max_separation: 102400
  fragment_length: 100
  fetcher: "xdget"   # xdget | memory

# Alignment and concordance
alignment:
  min_score: 90
  min_alignment_length: 95
  tolerance: 0.05
  save_alignments: false

# Runtime settings
runtime:
  log_level: "WARNING"
  log_file: ~
  work_dir: "."
  csv: false
"""
