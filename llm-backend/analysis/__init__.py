"""Problem breakdown analysis: gateway, normalizer, reveal sequencer and submission flow."""
