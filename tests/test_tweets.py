"""Tweet route tests"""
import pytest
from bson import ObjectId
from fastapi import status

from database import TWEETS
from tests.conftest import auth_headers

TWEETS_URL = "/api/v1/tweets"


def create(client, user_id, content="hello world"):
    return client.post(TWEETS_URL, json={"content": content}, headers=auth_headers(user_id))


@pytest.mark.high
class TestTweets:

    def test_create(self, client, two_users, mongo_db):
        alice, _ = two_users
        response = create(client, alice, "  first post  ")

        assert response.status_code == status.HTTP_201_CREATED
        tweet = response.json()["data"]
        assert tweet["content"] == "first post"
        assert tweet["owner"] == alice
        assert mongo_db[TWEETS].count_documents({}) == 1

    @pytest.mark.parametrize("body", [{"content": ""}, {"content": "   "}, {}])
    def test_content_required(self, client, two_users, body):
        alice, _ = two_users
        response = client.post(TWEETS_URL, json=body, headers=auth_headers(alice))
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Content is required"

    def test_create_requires_authentication(self, client):
        response = client.post(TWEETS_URL, json={"content": "hi"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_user_tweets_newest_first(self, client, two_users):
        alice, bob = two_users
        first = create(client, alice, "one").json()["data"]["id"]
        second = create(client, alice, "two").json()["data"]["id"]
        create(client, bob, "not alice")

        response = client.get(f"{TWEETS_URL}/user/{alice}")

        assert response.status_code == status.HTTP_200_OK
        assert [t["id"] for t in response.json()["data"]] == [second, first]

    def test_user_tweets_unknown_user(self, client):
        response = client.get(f"{TWEETS_URL}/user/{ObjectId()}")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "User not found"

    def test_update_by_owner(self, client, two_users):
        alice, _ = two_users
        tweet_id = create(client, alice).json()["data"]["id"]

        response = client.patch(f"{TWEETS_URL}/{tweet_id}", json={"content": "edited"}, headers=auth_headers(alice))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["content"] == "edited"

    def test_update_rejects_blank_content(self, client, two_users, mongo_db):
        alice, _ = two_users
        tweet_id = create(client, alice, "keep me").json()["data"]["id"]

        response = client.patch(f"{TWEETS_URL}/{tweet_id}", json={"content": " "}, headers=auth_headers(alice))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert mongo_db[TWEETS].find_one({"_id": ObjectId(tweet_id)})["content"] == "keep me"

    def test_update_by_other_user_rejected(self, client, two_users, mongo_db):
        alice, bob = two_users
        tweet_id = create(client, alice, "mine").json()["data"]["id"]

        response = client.patch(f"{TWEETS_URL}/{tweet_id}", json={"content": "yours"}, headers=auth_headers(bob))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert mongo_db[TWEETS].find_one({"_id": ObjectId(tweet_id)})["content"] == "mine"

    def test_delete(self, client, two_users, mongo_db):
        alice, bob = two_users
        tweet_id = create(client, alice).json()["data"]["id"]

        assert client.delete(f"{TWEETS_URL}/{tweet_id}", headers=auth_headers(bob)).status_code == 403
        assert mongo_db[TWEETS].count_documents({}) == 1

        assert client.delete(f"{TWEETS_URL}/{tweet_id}", headers=auth_headers(alice)).status_code == 200
        assert mongo_db[TWEETS].count_documents({}) == 0

    def test_uppercase_actor_id_owns_its_tweets(self, client, two_users):
        alice, _ = two_users
        headers = auth_headers(alice.upper())
        created = client.post(TWEETS_URL, json={"content": "shouting"}, headers=headers)
        assert created.status_code == status.HTTP_201_CREATED
        assert created.json()["data"]["owner"] == alice
        tweet_id = created.json()["data"]["id"]

        response = client.patch(f"{TWEETS_URL}/{tweet_id}", json={"content": "quieter"}, headers=headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["content"] == "quieter"

        assert client.delete(f"{TWEETS_URL}/{tweet_id}", headers=headers).status_code == status.HTTP_200_OK

    def test_delete_missing(self, client, two_users):
        alice, _ = two_users
        response = client.delete(f"{TWEETS_URL}/{ObjectId()}", headers=auth_headers(alice))
        assert response.status_code == status.HTTP_404_NOT_FOUND
