"""
NeedYou HTTP API.

A FastAPI application serving the payment, e-mail, push, translation and
marketplace routes. Firebase, Razorpay, Resend, Cloudinary and Google Maps
sit behind small client interfaces with in-memory doubles for tests and
local runs.
"""
