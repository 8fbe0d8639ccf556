""" Tumblegrab - walks a Tumblr blog and streams the media it finds. """
