"""Remote service client and public facade."""
