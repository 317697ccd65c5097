"""
SocialNet Backend — API Routes Package
========================================

Route Inventory:
    - users.py:   /users/register, /users/login, /users/profile, /users/verify,
                  /users/username/{username}, /users/{user_id}/liked-posts
    - posts.py:   /posts, /posts/user/{user_id}, /posts/{post_id},
                  /posts/{post_id}/like, /posts/{post_id}/likes,
                  /posts/{post_id}/comments[/{comment_id}]
    - health.py:  GET /health

Routes stay thin: parse the request, call a service, wrap the result in the
success envelope. Business rules live in the services.
"""
