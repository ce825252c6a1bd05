"""Order intake and fulfillment core"""
