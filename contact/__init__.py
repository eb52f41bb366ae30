"""
Contact Form App

Handles contact form submissions from the website's Contact page:
- Input sanitizing and validation (authoritative; browser checks are not trusted)
- Fixed-window rate limiting per client address
- Email notification to the company inbox
- Optional confirmation email to the submitter
"""
