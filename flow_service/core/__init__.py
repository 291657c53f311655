"""
Core logic of the flow service.

flows: the form schema models and the Flow JSON compiler.
channels: the Graph API client and WhatsApp message formatting.
"""
