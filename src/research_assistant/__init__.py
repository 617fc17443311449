"""
Research Assistant - multi-source retrieval and streaming answer relay.

This service handles a research question by:
1. Querying the selected information sources (in parallel)
2. Merging their results into one context document grouped by source
3. Injecting that context into the model's system prompt
4. Streaming the model's answer back token by token
5. Delivering the list of sources used once the answer is complete
"""

__version__ = "0.1.0"
