"""GraphQL query templates for the Linear API."""

# Query to get the API key's owner
GET_VIEWER = """
query GetViewer {
  viewer {
    id
    name
    email
  }
}
"""

# Query to get issues with their state, team and labels resolved inline
GET_ISSUES = """
query GetIssues($filter: IssueFilter, $cursor: String) {
  issues(first: 100, after: $cursor, filter: $filter) {
    pageInfo {
      hasNextPage
      endCursor
    }
    nodes {
      id
      number
      title
      description
      priority
      url
      createdAt
      updatedAt
      dueDate
      state {
        name
        type
      }
      team {
        id
        key
      }
      labels {
        nodes {
          name
        }
      }
    }
  }
}
"""
