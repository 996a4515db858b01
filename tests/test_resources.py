# Copyright (c) 2009-2010 Six Apart Ltd.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice,
#   this list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of Six Apart Ltd. nor the names of its contributors may
#   be used to endorse or promote products derived from this software without
#   specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

import unittest

import mock
import simplejson as json

from ghobjects import fields, http, resources
from ghobjects.dataobject import DataObject
from ghobjects.errors import ConfigurationError, DesignError
from ghobjects.iterable import LegacyArrayStrategy
from tests import utils


REPO = {
    'id': 1296269,
    'name': 'hello',
    'full_name': 'octocat/hello',
    'owner': {'login': 'octocat', 'id': 1},
}

USER = {
    'login': 'octocat',
    'id': 1,
    'name': 'The Octocat',
    'email': 'octocat@example.com',
}

REPO_PATH = utils.API + '/repos/octocat/hello'

COMPARE_URL = REPO_PATH + '/compare/main...topic'


def commit(sha, **kwargs):
    data = {
        'sha': sha,
        'author': {'login': 'octocat'},
        'commit': {'message': 'Commit %s' % (sha,),
                   'author': {'name': 'The Octocat', 'date': '2020-01-02T03:04:05Z'}},
        'parents': [],
    }
    data.update(kwargs)
    return data


def full_commit(sha, **kwargs):
    data = dict(
        stats={'total': 12, 'additions': 10, 'deletions': 2},
        files=[{'filename': 'README', 'additions': 10, 'deletions': 2}])
    data.update(kwargs)
    return commit(sha, **data)


def compare(commits, **kwargs):
    data = {
        'url': COMPARE_URL,
        'status': 'ahead',
        'ahead_by': len(commits),
        'behind_by': 0,
        'total_commits': len(commits),
        'base_commit': commit('base'),
        'merge_base_commit': commit('base'),
        'commits': commits,
        'files': [],
    }
    data.update(kwargs)
    return data


class ResourceTestCase(unittest.TestCase):

    def session_with_repo(self, *responses, **kwargs):
        session = utils.mock_session(utils.response(REPO), *responses, **kwargs)
        return session, session.get_repository('octocat/hello')


class TestRepository(ResourceTestCase):

    def test_get_repository(self):
        session, repo = self.session_with_repo()
        self.assertEqual(repo.full_name, 'octocat/hello')
        self.assertTrue(repo.root is session)
        self.assertEqual(utils.requested_uris(session.http), [REPO_PATH])

        self.assertTrue(session.intern_cache.get(resources.User, 'octocat') is repo.owner,
            'The repository owner is the session\'s canonical user')
        self.assertEqual(session.http.request.call_count, 1)

    def test_list_commits(self):
        session, repo = self.session_with_repo(
            utils.response([commit('c1'), commit('c2')]))
        commits = repo.list_commits(author='octocat').to_list()
        self.assertEqual([c.sha for c in commits], ['c1', 'c2'])
        self.assertEqual(utils.requested_uris(session.http)[1],
            REPO_PATH + '/commits?author=octocat')
        for c in commits:
            self.assertTrue(c.repository is repo)
            self.assertTrue(c.author is repo.owner)
        self.assertEqual(commits[0].commit.author.name, 'The Octocat')

    def test_get_commit(self):
        session, repo = self.session_with_repo(utils.response(full_commit('c1')))
        c = repo.get_commit('c1')
        self.assertTrue(c.repository is repo)
        self.assertEqual(c.lines_changed, 12)
        self.assertEqual(utils.requested_uris(session.http)[1], REPO_PATH + '/commits/c1')
        self.assertEqual(session.http.request.call_count, 2)


class TestCommit(ResourceTestCase):

    def test_lazy_stats(self):
        session, repo = self.session_with_repo(
            utils.response([commit('c1')]),
            utils.response(full_commit('c1')),
        )
        c = repo.list_commits().first()
        self.assertEqual(session.http.request.call_count, 2)

        self.assertEqual(c.lines_added, 10)
        self.assertEqual(c.lines_deleted, 2)
        self.assertEqual(session.http.request.call_count, 3,
            'Reading the stats fetched the commit once')
        self.assertEqual(utils.requested_uris(session.http)[2], REPO_PATH + '/commits/c1')
        self.assertEqual([f.filename for f in c.list_files()], ['README'])
        self.assertEqual(session.http.request.call_count, 3)
        self.assertEqual(c.commit.message, 'Commit c1', 'Merging kept the list data')

    def test_unbound_commit(self):
        c = resources.Commit.from_dict(commit('c1'))
        self.assertRaises(DesignError, lambda: c.lines_added)
        self.assertRaises(DesignError, lambda: c.repository)

    def test_list_files(self):
        session, repo = self.session_with_repo(utils.response(full_commit('c1')))
        files = repo.get_commit('c1').list_files()
        self.assertTrue(isinstance(files, LegacyArrayStrategy))

        many = [{'filename': 'f%d' % i} for i in range(300)]
        session, repo = self.session_with_repo(
            utils.response(full_commit('c1', files=many)),
            utils.response(full_commit('c1', files=many),
                link=utils.links(next=REPO_PATH + '/commits/c1?page=2')),
            utils.response(full_commit('c1', files=[{'filename': 'last'}])),
        )
        files = repo.get_commit('c1').list_files().to_list()
        self.assertEqual(len(files), 301)
        self.assertEqual(files[-1].filename, 'last')

    def test_parents_and_author(self):
        session, repo = self.session_with_repo(
            utils.response(full_commit('c1', parents=[{'sha': 'p1'}])),
            utils.response(USER),
            utils.response(full_commit('p1')),
        )
        c = repo.get_commit('c1')
        self.assertTrue(c.get_author() is repo.owner)
        parents = c.list_parents()
        self.assertEqual([p.sha for p in parents], ['p1'])
        self.assertTrue(parents[0].repository is repo)

    def test_author_in_full(self):
        session, repo = self.session_with_repo(
            utils.response([commit('c1'), commit('c2')]),
            utils.response(USER),
        )
        commits = repo.list_commits().to_list()
        self.assertTrue(repo.owner.name is None, 'Listed authors are partial')

        author = commits[0].get_author()
        self.assertEqual(author.name, 'The Octocat')
        self.assertEqual(author.email, 'octocat@example.com')
        self.assertTrue(author is repo.owner)
        self.assertTrue(commits[1].author.name == 'The Octocat',
            'Every holder of the canonical user sees the full data')
        self.assertEqual(utils.requested_uris(session.http)[2], utils.API + '/users/octocat')

        self.assertTrue(commits[1].get_author() is author)
        self.assertEqual(session.http.request.call_count, 3,
            'A user is fetched in full once per session')


class TestCompare(ResourceTestCase):

    def test_legacy(self):
        session, repo = self.session_with_repo(
            utils.response(compare([commit('c1'), commit('c2')])))
        cmp = repo.compare('main', 'topic')
        self.assertEqual(utils.requested_uris(session.http)[1], COMPARE_URL)
        self.assertTrue(cmp.repository is repo)
        self.assertEqual(cmp.status, resources.Compare.Status.AHEAD)
        self.assertFalse(cmp.use_paginated_commits)

        commits = cmp.commits
        self.assertTrue(isinstance(commits, tuple))
        self.assertEqual([c.sha for c in commits], ['c1', 'c2'])
        self.assertTrue(all(c.repository is repo for c in commits))
        self.assertTrue(cmp.base_commit.repository is repo)
        self.assertTrue(cmp.merge_base_commit.repository is repo)
        self.assertEqual(session.http.request.call_count, 2,
            'Unpaginated commits come from the comparison itself')

    def test_paginated(self):
        session, repo = self.session_with_repo(
            utils.response(compare([commit('c1')], total_commits=3)),
            utils.response(compare([commit('c1'), commit('c2')]),
                link=utils.links(next=COMPARE_URL + '?page=2')),
            utils.response(compare([commit('c3')])),
        )
        cmp = repo.compare('main', 'topic', paginated=True)
        self.assertTrue(cmp.use_paginated_commits)

        commits = cmp.commits
        self.assertEqual([c.sha for c in commits], ['c1', 'c2', 'c3'])
        self.assertTrue(all(c.repository is repo for c in commits))
        self.assertEqual(utils.requested_uris(session.http)[2:], [
            COMPARE_URL + '?per_page=100',
            COMPARE_URL + '?page=2&per_page=100',
        ])

    def test_paginated_default_page_size(self):
        session, repo = self.session_with_repo(
            utils.response(compare([], total_commits=1)),
            utils.response(compare([commit('c1')])),
        )
        cmp = repo.compare('main', 'topic', paginated=True)
        self.assertEqual([c.sha for c in cmp.list_commits()], ['c1'])
        self.assertEqual(utils.requested_uris(session.http)[2],
            COMPARE_URL + '?per_page=10')

    def test_paginated_session_page_size(self):
        session, repo = self.session_with_repo(
            utils.response(compare([], total_commits=1)),
            utils.response(compare([commit('c1')])),
            page_size=30,
        )
        cmp = repo.compare('main', 'topic', paginated=True)
        self.assertEqual([c.sha for c in cmp.list_commits()], ['c1'])
        self.assertEqual(utils.requested_uris(session.http)[2],
            COMPARE_URL + '?per_page=30')


class TestIssues(ResourceTestCase):

    def test_query(self):
        session, repo = self.session_with_repo(
            utils.response([{'number': 1, 'state': 'open', 'labels': [{'name': 'bug'}],
                             'user': {'login': 'octocat'}}]))
        issues = (repo.query_issues()
            .state(resources.IssueState.OPEN)
            .label('bug')
            .label('help wanted')
            .label('  ')
            .list()
            .to_list())
        self.assertEqual(utils.requested_uris(session.http)[1],
            REPO_PATH + '/issues?state=open&labels=bug%2Chelp+wanted')
        self.assertEqual(len(issues), 1)
        self.assertTrue(issues[0].repository is repo)
        self.assertTrue(issues[0].state is resources.IssueState.OPEN)
        self.assertEqual([l.name for l in issues[0].labels], ['bug'])
        self.assertTrue(issues[0].user is repo.owner)

    def test_bad_state(self):
        session, repo = self.session_with_repo()
        self.assertRaises(ConfigurationError, repo.query_issues().state, 'sideways')


class TestStatistics(ResourceTestCase):

    def test_code_frequency(self):
        session, repo = self.session_with_repo(
            utils.response([[1302998400, 1124, -435]]))
        weeks = repo.statistics().code_frequency()
        self.assertEqual(len(weeks), 1)
        self.assertEqual(weeks[0].week, 1302998400)
        self.assertEqual(weeks[0].deletions, -435)
        self.assertEqual(utils.requested_uris(session.http)[1],
            REPO_PATH + '/stats/code_frequency')

    def test_code_frequency_not_ready(self):
        session, repo = self.session_with_repo(
            utils.response({}, status=202),
            utils.response(None, status=204),
        )
        self.assertEqual(repo.statistics().code_frequency(), [])
        self.assertEqual(repo.statistics().code_frequency(), [])

    def test_punch_card(self):
        session, repo = self.session_with_repo(utils.response([[0, 0, 5], [0, 1, 43]]))
        items = repo.statistics().punch_card()
        self.assertEqual([(i.day_of_week, i.hour_of_day, i.commits) for i in items],
            [(0, 0, 5), (0, 1, 43)])

    def test_participation(self):
        session, repo = self.session_with_repo(
            utils.response({'all': [11, 21], 'owner': [3, 2]}))
        p = repo.statistics().participation()
        self.assertEqual(p.all_commits, [11, 21])
        self.assertEqual(p.owner_commits, [3, 2])

    def contributors(self):
        return utils.response([{
            'author': {'login': 'octocat'},
            'total': 135,
            'weeks': [{'w': 1367712000, 'a': 6898, 'd': 77, 'c': 10}],
        }])

    @mock.patch('ghobjects.resources.time.sleep')
    def test_contributor_stats_wait(self, sleep):
        session, repo = self.session_with_repo(
            utils.response(None, status=202),
            utils.response(None, status=202),
            utils.response(None, status=200),
            self.contributors(),
        )
        stats = repo.statistics().contributor_stats().to_list()
        self.assertEqual(sleep.call_count, 2)
        sleep.assert_called_with(resources.RepositoryStatistics.WAIT_SLEEP_INTERVAL)
        self.assertEqual(len(stats), 1)
        self.assertTrue(stats[0].author is repo.owner)
        self.assertEqual(stats[0].get_week(1367712000).additions, 6898)
        self.assertRaises(KeyError, stats[0].get_week, 0)

    @mock.patch('ghobjects.resources.time.sleep')
    def test_contributor_stats_never_ready(self, sleep):
        session, repo = self.session_with_repo(
            *[utils.response(None, status=202) for i in range(4)])
        self.assertTrue(repo.statistics().contributor_stats() is None)
        self.assertEqual(sleep.call_count, resources.RepositoryStatistics.MAX_WAIT_ITERATIONS)

    @mock.patch('ghobjects.resources.time.sleep')
    def test_contributor_stats_no_wait(self, sleep):
        session, repo = self.session_with_repo(utils.response(None, status=202))
        self.assertTrue(repo.statistics().contributor_stats(wait_till_ready=False) is None)
        self.assertFalse(sleep.called)


class ViewerData(DataObject):
    viewer = fields.Object(resources.User)


class TestGraphQL(unittest.TestCase):

    query = 'query { viewer { login } }'

    def test_graphql(self):
        session = utils.mock_session(
            utils.response({'data': {'viewer': {'login': 'octocat'}}}))
        data = session.graphql(self.query, ViewerData)
        self.assertEqual(data.viewer.login, 'octocat')
        self.assertTrue(session.intern_cache.get(resources.User, 'octocat') is data.viewer)

        session.http.request.assert_called_once_with(
            uri=utils.API + '/graphql',
            method='POST',
            headers={'accept': 'application/json', 'content-type': 'application/json'},
            body=json.dumps({'query': self.query}),
        )

    def test_graphql_errors(self):
        session = utils.mock_session(utils.response({
            'data': None,
            'errors': [{'message': 'Field "viewr" does not exist'}],
        }))
        try:
            session.graphql(self.query, ViewerData)
        except http.GraphQLError as exc:
            self.assertEqual(exc.errors, [{'message': 'Field "viewr" does not exist'}])
            self.assertTrue('viewr' in str(exc))
        else:
            self.fail('No GraphQLError raised for a response with errors')

    def test_graphql_not_an_object(self):
        session = utils.mock_session(utils.response([1, 2]))
        self.assertRaises(http.BadResponse, session.graphql, self.query, ViewerData)


if __name__ == '__main__':
    unittest.main()
